"""
Land-title portfolio reports for an organisation or an individual.

Three layouts share one template per variant: the full portfolio, the
"title references only" summary, and the near-match "no data" report.
"""

from __future__ import annotations

from typing import Any, Dict, List

from src.utils.formatters import NA, DASH_DATE, DASH_SHORT_DATE, LONG_DATE, format_date, format_time, to_number
from src.utils.payload import dig, first_non_empty, join_non_empty, records

from ..search_term import resolve_search_word
from .common import ReportFields, empty_row, esc, page_of, resolve_now, table_row
from .property import encumbrance_items, owner_names, parcel_rows, sales_rows, _money

ORGANISATION = "land-title-organisation"
INDIVIDUAL = "land-title-individual"


def _segment(order: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = order.get(key)
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return {}


def _selection(data, rdata, business) -> Dict[str, Any]:
    for candidate in (
        dig(business, "landTitleSelection"),
        dig(data, "business", "landTitleSelection"),
        dig(rdata, "business", "landTitleSelection"),
        data.get("landTitleSelection"),
        rdata.get("landTitleSelection"),
    ):
        if isinstance(candidate, dict) and candidate:
            return candidate
    return {}


def title_references(selection, rdata) -> Dict[str, List[Any]]:
    """``{"current": [...], "historical": [...]}`` from the selection or the payload."""
    for source in (selection.get("titleReferences"), rdata.get("titleReferences")):
        if isinstance(source, list) and source:
            return {"current": source, "historical": []}
        if isinstance(source, dict) and isinstance(source.get("current"), list):
            refs = {"current": source["current"], "historical": source.get("historical") or []}
            if refs["current"] or refs["historical"]:
                return refs
    return {"current": [], "historical": []}


def is_summary(*sources) -> bool:
    return any(
        isinstance(s, dict) and (s.get("summary") is True or s.get("detail") == "SUMMARY")
        for s in sources
    )


def first_owner_name(orders) -> str:
    if not orders:
        return ""
    owners = records(dig(_segment(orders[0], "RealPropertySegment"), "RegistryBlock", "Ownership", "Owners"))
    names = owner_names(owners[:1])
    return names[0] if names else ""


def primary_address(orders) -> str:
    if not orders:
        return NA
    address = _segment(orders[0], "LocationSegment").get("Address") or {}
    parts = []
    if address.get("Unit"):
        parts.append(f"UNIT {address['Unit']}")
    street = join_non_empty([address.get("StreetNumber") if address.get("StreetName") else None,
                             address.get("StreetName"), address.get("StreetType")])
    if street:
        parts.append(street)
    locality = join_non_empty([address.get("City"), address.get("State"), address.get("PostCode")])
    if locality:
        parts.append(locality)
    return ", ".join(parts) or NA


def _properties(count: int, verb: str) -> str:
    if count <= 0:
        return f"0 properties {verb}"
    return f"{count} {'property' if count == 1 else 'properties'} {verb}"


def _search_page(order, index: int, report_date: str, search_stamp: str, total_pages: int) -> str:
    real_property = _segment(order, "RealPropertySegment")
    registry = real_property.get("RegistryBlock") or {}
    identity = real_property.get("IdentityBlock") or {}
    address = _segment(order, "LocationSegment").get("Address") or {}
    source = dig(order, "OrderResultBlock", "DataSources", 0, default={})
    dealings = records(dig(registry, "Ownership", "Dealings"))

    items = (
        ("Folio", esc(registry.get("Folio"))),
        ("Title Reference", esc(identity.get("TitleReference"))),
        ("Search Date", search_stamp),
        ("Edition Date", format_date(source.get("EditionIssuedDateTime"), DASH_DATE)),
        ("Parish", esc(address.get("City"))),
        ("County", "AUSTRALIA"),
        ("Transfer Number", esc(dealings[0].get("Reference")) if dealings else NA),
    )
    grid = "".join(
        f'<div class="data-item"><div class="data-label">{label}</div><div class="data-value">{value}</div></div>'
        for label, value in items
    )
    return (
        '<div class="page">'
        f'<div class="brand-header"><div class="doc-id">Report Date: {report_date}</div></div>'
        '<div class="page-title">Title Search Information</div>'
        f'<div class="card"><div class="card-header">Property Title Details</div><div class="data-grid three-col">{grid}</div></div>'
        '<div class="card"><div class="card-header">Schedule of Parcels</div>'
        "<table><thead><tr><th>Lot Description</th><th>Title Diagram</th></tr></thead>"
        f"<tbody>{parcel_rows(records(registry.get('Plans')), identity)}</tbody></table></div>"
        '<div class="card"><div class="card-header">Encumbrances and Notifications</div>'
        f'<ol class="text-sm">{encumbrance_items(records(registry.get("Interests")))}</ol></div>'
        f'<div class="page-number">{page_of(3 + index, total_pages)}</div>'
        "</div>"
    )


def _ownership_rows(orders, kind: str, status: str) -> str:
    rows = []
    for order in orders:
        real_property = _segment(order, "RealPropertySegment")
        dealings = records(dig(real_property, "RegistryBlock", "Ownership", "Dealings"))
        reference = dealings[0].get("Reference") if dealings else None
        rows.append(table_row(
            esc(dig(real_property, "IdentityBlock", "TitleReference")),
            esc(dig(_segment(order, "LocationSegment"), "Address", "City")),
            kind,
            f"T {esc(reference)}" if reference else NA,
            status,
        ))
    return "".join(rows)


def _reference_rows(refs: Dict[str, List[Any]]) -> str:
    rows = []
    index = 0
    for status, items in (("Current", refs["current"]), ("Historical", refs["historical"])):
        for item in items:
            index += 1
            if isinstance(item, dict):
                reference = first_non_empty(item.get("titleReference"), item.get("TitleReference"))
                jurisdiction = item.get("jurisdiction")
            else:
                reference, jurisdiction = item, None
            rows.append(table_row(index, esc(reference), esc(jurisdiction), status))
    return "".join(rows) or empty_row("No title references found", 4)


def extract_land_title_data(data, business=None, report_type=None, now=None) -> ReportFields:
    now = resolve_now(now)
    variant = INDIVIDUAL if report_type == INDIVIDUAL else ORGANISATION
    rdata = data.get("rdata") if isinstance(data.get("rdata"), dict) else data

    selection = _selection(data, rdata, business)
    refs = title_references(selection, rdata)
    summary = is_summary(selection, rdata, data)
    orders = records(rdata.get("titleOrders"))
    historical_orders = records(rdata.get("historicalTitleOrders"))
    no_data = rdata.get("noDataAvailable") is True or rdata.get("isNearMatch") is True

    search_word = resolve_search_word(business, variant)
    owner_name = first_non_empty(first_owner_name(orders), search_word, default=NA)
    person_name = first_non_empty(search_word, first_owner_name(orders), default=NA)

    cotality = [c for c in (rdata.get("cotality") if isinstance(rdata.get("cotality"), list) else
                            [rdata.get("cotality")]) if isinstance(c, dict)]
    property_data = dig(cotality[0], "propertyData", default={}) if cotality else {}
    has_addon = selection.get("addOn") is True or (business or {}).get("addOn") is True
    has_valuation = bool(cotality)
    if variant == INDIVIDUAL:
        include_valuation = has_addon and has_valuation
    else:
        include_valuation = has_valuation
    include_valuation = include_valuation and not summary and not no_data

    report_date = now.strftime(LONG_DATE)
    current_count = int(to_number(rdata.get("currentCount")) or 0) or len(orders)
    historical_count = int(to_number(rdata.get("historicalCount")) or 0)
    if no_data:
        current_count = historical_count = 0

    # ── Page layout ──────────────────────────────────────────────────
    if summary:
        search_pages = 0
        total_pages = 2
    elif no_data:
        search_pages = 1
        total_pages = 4
    else:
        search_pages = len(orders)
        total_pages = 2 + search_pages + 1 + (1 if include_valuation else 0) + 1
    portfolio_page = 3 + search_pages
    valuation_page = portfolio_page + 1 if include_valuation else ""

    search_stamp = f"{now.strftime(DASH_SHORT_DATE)} {now.strftime('%I:%M')} {'AM' if now.hour < 12 else 'PM'}"
    search_sections = "" if (summary or no_data) else "".join(
        _search_page(order, index, report_date, search_stamp, total_pages) for index, order in enumerate(orders)
    )

    cotality_sales = records(dig(cotality[0], "salesHistory", "saleList")) if cotality else []
    name = esc(person_name if variant == INDIVIDUAL else owner_name)

    fields = ReportFields(
        property_owner_name=esc(owner_name),
        person_name=esc(person_name),
        report_date=report_date,
        report_date_time=f"{report_date}, {format_time(now)}",
        current_properties_count=_properties(current_count, "currently owned"),
        past_properties_count=_properties(historical_count, "previously owned"),
        primary_property_address=esc(primary_address(orders)) if not no_data else NA,
        primary_property_value=_money(property_data.get("avmEstimate")) if has_valuation else NA,
        primary_title_reference=esc(dig(_segment(orders[0], "RealPropertySegment"), "IdentityBlock", "TitleReference"))
        if orders else NA,
        title_search_information_sections=search_sections,
        current_ownership_rows=_ownership_rows(orders, "Owner", "Current")
        or empty_row("No current properties found", 5),
        past_ownership_rows=_ownership_rows(historical_orders, "Owner (Past)", "PAST")
        or empty_row("No past properties found", 5),
        past_ownership_heading=f"Past Ownership ({historical_count} {'Property' if historical_count == 1 else 'Properties'})",
        title_reference_rows=_reference_rows(refs),
        title_references_count=len(refs["current"]) + len(refs["historical"]),
        property_avm_estimate=_money(property_data.get("avmEstimate")),
        property_confidence_level=esc(property_data.get("confidenceLevel")),
        property_valuation_date=format_date(property_data.get("valuationDate"), LONG_DATE),
        property_sales_history_rows=sales_rows(cotality_sales),
        portfolio_page_number=portfolio_page,
        valuation_page_number=valuation_page,
        disclaimers_page_number=total_pages,
        total_pages=total_pages,
        has_addon="true" if has_addon else "false",
        company_type=variant,
        acn=NA,
        abn=NA,
        companyName=name,
    )
    fields.section("title_references_only", summary)
    fields.section("full_report", not summary)
    fields.section("no_data", no_data and not summary)
    fields.section("portfolio", not no_data and not summary)
    fields.section("property_overview", variant == INDIVIDUAL and has_addon and not summary and not no_data)
    fields.section("valuation", include_valuation)
    return fields
