"""Property title report: title order result plus optional Cotality property data."""

from __future__ import annotations

from typing import Any, Dict, List

from src.utils.formatters import NA, LONG_DATE, format_boolean, format_currency, format_date, format_land_area, format_time, parse_date, to_number
from src.utils.payload import dig, first_non_empty, is_empty, join_non_empty, records

from .common import ReportFields, esc, esc_first, page_of, sort_by_date, table_row

BASE_PAGES = 4


def _first(value) -> Dict[str, Any]:
    items = records(value) if isinstance(value, list) else []
    return items[0] if items else {}


def _money(value: Any) -> str:
    if is_empty(value):
        return NA
    if to_number(value) is None:
        return esc(value)
    return format_currency(value, decimals=0)


def _date_time(value: Any) -> str:
    dt = parse_date(value)
    if dt is None:
        return NA
    return f"{dt.strftime(LONG_DATE)}, {format_time(dt)}"


def owner_names(owners: List[Dict[str, Any]]) -> List[str]:
    names = []
    for owner in owners:
        if owner.get("Name"):
            names.append(str(owner["Name"]))
        elif isinstance(owner.get("Individual"), dict):
            individual = owner["Individual"]
            name = join_non_empty([individual.get("FirstName"), individual.get("LastName")])
            if name:
                names.append(name)
    return names


def property_address(identity: Dict[str, Any], location: Dict[str, Any]) -> str:
    if identity.get("AddressString"):
        return str(identity["AddressString"])
    street = join_non_empty([location.get("StreetNumber"), location.get("StreetName"), location.get("StreetType")])
    locality = join_non_empty([
        first_non_empty(location.get("City"), identity.get("Locality")),
        location.get("State"),
        location.get("PostCode"),
    ])
    return join_non_empty([street, locality], sep=", ") or NA


def _plan_reference(plan: Dict[str, Any]) -> str:
    if plan.get("Reference") and plan.get("Type") == "DEPOSITED_PLAN":
        return f"DP{plan['Reference']}"
    return join_non_empty([plan.get("Type"), plan.get("Reference")])


def parcel_rows(plans: List[Dict[str, Any]], identity: Dict[str, Any]) -> str:
    rows = []
    for plan in plans:
        reference = _plan_reference(plan)
        description = first_non_empty(plan.get("ParcelDescription"), dig(identity, "ParcelDescription", 0))
        if not description:
            lot = f"Lot {plan['LotReference']}" if plan.get("LotReference") else ""
            description = join_non_empty([lot, f"in {reference}" if reference else ""])
        rows.append(table_row(esc(description), esc(reference)))
    return "".join(rows) or '<tr><td colspan="2" class="empty-row">No parcel information available</td></tr>'


def encumbrance_items(interests: List[Dict[str, Any]]) -> str:
    items = []
    for interest in interests:
        description = first_non_empty(
            interest.get("Description"), interest.get("SubType"), interest.get("Type"), default="Encumbrance"
        )
        dealings = [d.get("Reference") for d in records(interest.get("Dealing")) if d.get("Reference")]
        suffix = f" ({', '.join(str(d) for d in dealings)})" if dealings else ""
        items.append(f"<li>{esc(description)}{esc(suffix, '')}</li>")
    return "".join(items) or '<li class="muted">No encumbrances recorded</li>'


def sales_rows(sales: List[Dict[str, Any]]) -> str:
    rows = []
    for sale in sort_by_date(sales, "contractDate"):
        price = "Price Withheld" if sale.get("isPriceWithheld") else _money(sale.get("price"))
        rows.append(table_row(
            format_date(sale.get("contractDate"), LONG_DATE),
            esc(price),
            esc_first(sale.get("saleMethod"), sale.get("type")),
        ))
    return "".join(rows) or '<tr><td colspan="3" class="empty-row">No sales history available</td></tr>'


def _display(value: Any) -> str:
    return NA if value is None or value == "" else esc(value)


def extract_property_data(data, business=None, report_type=None, now=None) -> ReportFields:
    cotality = data.get("cotality") if isinstance(data.get("cotality"), dict) else None
    property_data = dig(cotality, "propertyData", default={}) if cotality else {}
    sales = records(dig(cotality, "salesHistory", "saleList")) if cotality else []

    order = data.get("titleOrder") if isinstance(data.get("titleOrder"), dict) else {}
    result_block = order.get("OrderResultBlock") or {}
    source = _first(result_block.get("DataSources"))
    service_block = order.get("ServiceResultBlock") or {}
    location = _first(order.get("LocationSegment")).get("Address") or {}
    resource = _first(order.get("ResourceSegment"))
    real_property = _first(order.get("RealPropertySegment"))
    identity = real_property.get("IdentityBlock") or {}
    registry = real_property.get("RegistryBlock") or {}
    ownership = registry.get("Ownership") or {}
    owners = records(ownership.get("Owners"))

    names = owner_names(owners)
    zoning = first_non_empty(
        next((s.get("zoneDescriptionLocal") for s in sales if s.get("zoneDescriptionLocal")), None),
        property_data.get("zoneDescriptionLocal"),
        property_data.get("zoneCodeLocal"),
        default=NA,
    )
    estimated = property_data.get("estimatedRange") or {}
    if estimated.get("low") is not None and estimated.get("high") is not None:
        estimated_range = f"{_money(estimated['low'])} – {_money(estimated['high'])}"
    else:
        estimated_range = NA

    car_spaces = first_non_empty(property_data.get("carSpaces"), property_data.get("lockUpGarages"))
    transfer = ", ".join(
        str(d.get("Reference")) for d in records(ownership.get("Dealings")) if d.get("Reference")
    )
    search_date = _date_time(source.get("SearchDateTime"))

    include_valuation = cotality is not None
    total_pages = BASE_PAGES + (1 if include_valuation else 0)

    fields = ReportFields(
        report_date=format_date(result_block.get("OrderCompletedDateTime"), LONG_DATE),
        property_report_title="Property Title Report",
        property_owner_name=esc(", ".join(names)),
        property_owner_names_html="<br>".join(esc(n) for n in names) or NA,
        property_owner_tenancy=esc(ownership.get("Tenancy")),
        property_owner_type=esc(owners[0].get("Type") if owners else None),
        property_address=esc(property_address(identity, location)),
        property_beds=_display(property_data.get("beds")),
        property_baths=_display(property_data.get("baths")),
        property_car_spaces=_display(car_spaces),
        property_lockup_garages=_display(property_data.get("lockUpGarages")),
        property_land_area=format_land_area(property_data.get("landArea")),
        property_land_area_source=esc(property_data.get("landAreaSource")),
        property_type=esc(property_data.get("propertyType")),
        property_sub_type=esc(property_data.get("propertySubType")),
        property_zoning=esc(zoning),
        property_local_government=esc_first(location.get("City"), identity.get("Locality")),
        property_is_active=format_boolean(property_data.get("isActiveProperty")),
        property_year_built=_display(property_data.get("yearBuilt")),
        property_folio=esc(registry.get("Folio")),
        property_title_reference=esc(identity.get("TitleReference")),
        property_volume=esc(registry.get("Volume")),
        property_search_date=search_date,
        property_search_obtained=search_date,
        property_edition_date=format_date(source.get("EditionIssuedDateTime"), LONG_DATE),
        property_parish=esc(identity.get("Parish")),
        property_county=esc(identity.get("County")),
        property_transfer_reference=esc(transfer),
        property_title_type=esc_first(identity.get("TitleType"), registry.get("TitleType")),
        property_estate_type=esc_first(identity.get("EstateType"), registry.get("EstateType")),
        property_title_result_status=esc(service_block.get("TitleResultStatus")),
        property_schedule_parcels_rows=parcel_rows(records(registry.get("Plans")), identity),
        property_encumbrances_list=encumbrance_items(records(registry.get("Interests"))),
        property_sales_history_rows=sales_rows(sales),
        property_avm_estimate=_money(property_data.get("avmEstimate")),
        property_estimated_range=estimated_range,
        property_valuation_date=format_date(property_data.get("valuationDate"), LONG_DATE),
        property_confidence_level=esc(property_data.get("confidenceLevel")),
        property_order_reference=esc(result_block.get("OrderReference")),
        property_order_identifier=esc(result_block.get("OrderIdentifier")),
        property_title_resource_identifier=esc_first(
            service_block.get("TitleResourceIdentifier"), resource.get("ResourceURI")
        ),
        page_number_2=page_of(2, total_pages),
        page_number_3=page_of(3, total_pages),
        page_number_4=page_of(4, total_pages) if include_valuation else "",
        page_number_5=page_of(5 if include_valuation else 4, total_pages),
        total_pages=total_pages,
        company_type="property",
        acn=NA,
        abn=NA,
        companyName=esc(", ".join(names)),
    )
    fields.section("property_attributes", include_valuation)
    fields.section("valuation", include_valuation)
    return fields
