"""
PPSR search result (organisation by ABN/ACN, or director by name).

Registration detail pages are rendered here because their number depends
on the payload; the glossary and document-information pages are static
template blocks fed by the contact rows and page numbers below.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Any, Dict, List

from src.utils.formatters import NA, LONG_DATE, MONTH_YEAR, digits_only, format_acn, format_date, parse_date, to_number
from src.utils.payload import dig, first_dict, first_non_empty, join_non_empty, records

from ..search_term import resolve_search_word
from .common import ReportFields, data_item, empty_block, esc, esc_first, is_after, page_of, resolve_now

BLANKET = "All Pap No Except"
MOTOR_VEHICLE = "Motor Vehicle"

MAX_REGISTRATION_PAGES = 7
MAX_PARTIES_AT_A_GLANCE = 4

REGISTRATION_START = "%d %B %Y, %H:%M"
REGISTRATION_TIME = "%d %B %Y, %H:%M:%S"

BLANKET_DESCRIPTION = "All present and after-acquired property - No exceptions"


def _party(reg: Dict[str, Any]) -> str:
    return reg.get("securedPartySummary") or "Unknown"


# ── Summary pages ────────────────────────────────────────────────────────────


def _security_breakdown(blanket: int, vehicles: int) -> str:
    lines = []
    if blanket:
        lines.append(f"{blanket} × BLANKET SECURITY (All Assets)")
    if vehicles:
        lines.append(f"{vehicles} × MOTOR VEHICLE SECURITIES")
    return "<br>".join(lines) or "No data available"


def _secured_party_rows(registrations, vehicles, blankets) -> str:
    parties: "OrderedDict[str, int]" = OrderedDict()
    for reg in registrations:
        parties[_party(reg)] = parties.get(_party(reg), 0) + 1

    shown = list(parties.items())[:MAX_PARTIES_AT_A_GLANCE]
    blanket_parties = {_party(r) for r in blankets}
    rows = []
    for name, total in shown:
        vehicle_count = sum(1 for v in vehicles if _party(v) == name)
        if total == 1:
            assets = "All Company Assets"
        elif vehicle_count:
            assets = f"{vehicle_count} Vehicles"
        else:
            assets = f"{total} Assets"
        priority = "CRITICAL" if name in blanket_parties else "HIGH"
        rows.append(
            '<div class="data-grid party-row">'
            f'<div class="data-value">{esc(name)}</div>'
            f'<div class="data-value">{"Vehicle Finance" if vehicle_count else "General Security"}</div>'
            f'<div class="data-value">{assets}</div>'
            f'<div><span class="badge {priority.lower()}">{priority}</span></div>'
            "</div>"
        )
    return '<div class="divider"></div>'.join(rows) or empty_block()


def _critical_security(reg) -> str:
    if reg is None:
        return f'<div class="card">{empty_block()}</div>'
    end = format_date(reg.get("registrationEndTime"), LONG_DATE, default="No expiry date")
    end_text = "no end date" if end == "No expiry date" else f"end date: {end}"
    return (
        '<div class="card alert">'
        '<div class="card-header">[CRITICAL] - Blanket Security Interest</div>'
        f'<div class="card-text"><strong>{esc(reg.get("securedPartySummary"))}</strong> holds an unrestricted '
        "security over <strong>ALL present and after-acquired property</strong> with "
        f"<strong>{end_text}</strong>. This is the most significant security interest on the register.</div>"
        '<div class="data-grid two-col">'
        + data_item("Registration", esc(reg.get("registrationNumber")))
        + data_item("Started", format_date(reg.get("registrationStartTime"), MONTH_YEAR))
        + data_item("Expires", end)
        + data_item("Scope", "Everything the company owns or will own")
        + "</div></div>"
    )


def _expiry_timeline(vehicles) -> str:
    years: Dict[int, int] = {}
    for vehicle in vehicles:
        dt = parse_date(vehicle.get("registrationEndTime"))
        if dt is not None:
            years[dt.year] = years.get(dt.year, 0) + 1
    return "".join(
        f"• <strong>{year}:</strong> {years[year]} vehicles<br>" for year in sorted(years)
    ) or "No data available"


# ── Registration pages ───────────────────────────────────────────────────────


def _page(search_number: str, body: str, page_label: str) -> str:
    return (
        '<div class="page">'
        f'<div class="brand-header"><div class="doc-id">{search_number}</div></div>'
        f"{body}"
        f'<div class="page-number">{page_label}</div>'
        "</div>"
    )


def _contact_address(address_for_service) -> str:
    mailing = address_for_service.get("mailingAddress") or {}
    parts = [mailing.get(k) for k in ("line1", "line2", "line3", "locality", "state", "postcode")]
    return esc(join_non_empty(parts, sep=", "))


def _registration_page(reg, index: int, registrations, vehicles, search_number: str, total_pages: int) -> str:
    collateral = reg.get("collateralClassType")
    is_blanket = collateral == BLANKET
    is_vehicle = collateral == MOTOR_VEHICLE
    party = reg.get("securedPartySummary")

    if is_vehicle:
        title_kind = "Motor Vehicle"
    elif is_blanket:
        title_kind = "General Security"
    else:
        title_kind = esc(collateral)

    subtitle = esc(party)
    if is_vehicle:
        same_party = [v for v in vehicles if v.get("securedPartySummary") == party]
        if len(same_party) > 1:
            order = {id(r): i for i, r in enumerate(registrations)}
            position = sum(1 for v in same_party if order[id(v)] <= index)
            subtitle = f"{esc(party)} (Vehicle {position} of {len(same_party)})"

    body = [
        f'<div class="section-title">Registration #{index + 1} - {title_kind}</div>',
        f'<div class="section-subtitle">{subtitle}</div>',
    ]
    if is_blanket:
        body.append(
            '<div class="card alert"><div class="card-text"><strong>IMPORTANT:</strong> This registration '
            f"provides {esc(party, 'the secured party')} with security over EVERYTHING the company owns or "
            "acquires. This is the most comprehensive security interest on file.</div></div>"
        )

    items = [
        data_item("Registration Number", esc(reg.get("registrationNumber"))),
        data_item("Secured Party", esc(party)),
    ]
    secured = dig(reg, "securedParties", 0, default={})
    if isinstance(secured, dict) and secured.get("organisationNumberType") == "ACN":
        items.append(data_item("ACN", esc(format_acn(secured.get("organisationNumber")))))

    serial = reg.get("serialNumber")
    serial_type = reg.get("serialNumberType")
    if is_vehicle and serial:
        items.append(data_item(esc(serial_type, "VIN"), esc(serial)))
    elif is_vehicle and serial_type:
        items.append(data_item("Serial Number", NA))
        items.append(data_item("Serial Number Type", esc(serial_type), wide=True))

    items.append(data_item("Registration Start", format_date(reg.get("registrationStartTime"), REGISTRATION_START)))
    end = reg.get("registrationEndTime")
    end_text = format_date(end, REGISTRATION_TIME) if end else "<strong>No stated end time</strong>"
    items.append(data_item("Registration End", end_text))
    if reg.get("registrationChangeTime"):
        items.append(data_item("Last Changed", format_date(reg["registrationChangeTime"], REGISTRATION_TIME)))

    items.append(data_item("Collateral Type", esc_first(reg.get("collateralSummary"), collateral)))
    items.append(data_item("PMSI", "Yes" if reg.get("isPmsi") else "No"))
    if is_blanket:
        items.append(data_item("Collateral Type", f"<strong>{BLANKET_DESCRIPTION}</strong>", wide=True))
    elif reg.get("collateralDescription"):
        items.append(data_item("Collateral Description", esc(reg["collateralDescription"]), wide=True))
    if reg.get("proceedsClaimedDescription"):
        items.append(data_item("Proceeds", esc(reg["proceedsClaimedDescription"]), wide=True))
    if is_vehicle:
        items.append(data_item(
            "Vehicle Description", esc(reg.get("vehicleDescriptiveText"), "Unknown/Unknown/Unknown"), wide=True
        ))

    service = reg.get("addressForService") if isinstance(reg.get("addressForService"), dict) else {}
    email = esc(service.get("emailAddress"))
    items.append(data_item("Contact Email", email))
    if service.get("faxNumber"):
        items.append(data_item("Contact Email / Fax", f"{email} / Fax: {esc(service['faxNumber'])}", wide=True))
    items.append(data_item("Contact Address", _contact_address(service)))

    body.append(f'<div class="card"><div class="data-grid two-col">{"".join(items)}</div></div>')
    return _page(search_number, "".join(body), page_of(4 + index, total_pages))


def _no_registrations_page(search_number: str, total_pages: int) -> str:
    body = f'<div class="section-title">Registration Details</div><div class="card">{empty_block()}</div>'
    return _page(search_number, body, page_of(4, total_pages))


def _contact_rows(registrations) -> str:
    parties: "OrderedDict[str, Dict[str, str]]" = OrderedDict()
    for reg in registrations:
        name = reg.get("securedPartySummary") or ""
        if name in parties:
            continue
        service = reg.get("addressForService") if isinstance(reg.get("addressForService"), dict) else {}
        parties[name] = {
            "email": service.get("emailAddress") or "-",
            "fax": service.get("faxNumber") or "-",
        }
    rows = []
    for name, contact in parties.items():
        fax = f"Fax: {esc(contact['fax'])}" if contact["fax"] != "-" else "-"
        rows.append(
            '<div class="data-grid contact-row">'
            f'<div class="data-value">{esc(name, "")}</div>'
            f'<div class="data-value">{esc(contact["email"])}</div>'
            f'<div class="data-value">{fax}</div>'
            "</div>"
        )
    return "".join(rows) or empty_block("No secured party contacts available")


# ── Extractor ────────────────────────────────────────────────────────────────


def _entity(business, report_type):
    """Grantor name, ACN and ABN shown on the cover."""
    if report_type == "director-ppsr":
        return resolve_search_word(business, "director-ppsr") or "", "", ""
    business = business or {}
    abn = str(first_non_empty(business.get("Abn"), business.get("abn"), default=""))
    acn = digits_only(abn)[2:] if len(digits_only(abn)) == 11 else ""
    return first_non_empty(business.get("Name"), business.get("name"), default=""), acn, abn


def extract_ppsr_data(data, business=None, report_type=None, now=None) -> ReportFields:
    now = resolve_now(now)
    resource = first_dict(data.get("resource"), dig(data, "rdata", "resource"), data)
    criteria = first_dict(dig(resource, "searchCriteriaSummaries", 0))
    registrations: List[Dict[str, Any]] = records(resource.get("items"))

    search_number = esc_first(criteria.get("searchNumber"), data.get("searchNumber"))
    count = to_number(criteria.get("resultCount"))
    result_count = int(count) if count is not None else len(registrations)

    entity_name, entity_acn, entity_abn = _entity(business, report_type)
    formatted_acn = format_acn(entity_acn) if entity_acn else ""

    search_date = esc(data.get("searchDate"), now.strftime(LONG_DATE))
    search_date_time = esc(data.get("searchDateTime"), f"{now.strftime('%d %B %Y, %H:%M')} AEDT")

    active = [r for r in registrations if not r.get("registrationEndTime") or is_after(r["registrationEndTime"], now)]
    blankets = [r for r in registrations if r.get("collateralClassType") == BLANKET]
    vehicles = [r for r in registrations if r.get("collateralClassType") == MOTOR_VEHICLE]

    shown = registrations[:MAX_REGISTRATION_PAGES]
    registration_page_count = len(shown) or 1
    total_pages = 3 + registration_page_count + 2
    glossary_page = 3 + registration_page_count + 1

    if shown:
        pages = "".join(
            _registration_page(reg, index, registrations, vehicles, search_number, total_pages)
            for index, reg in enumerate(shown)
        )
    else:
        pages = _no_registrations_page(search_number, total_pages)

    if len(active) == result_count:
        search_status = "All registrations current and valid"
    else:
        search_status = f"{len(active)} active, {result_count - len(active)} expired"

    return ReportFields(
        cover_company_name=esc(entity_name),
        cover_report_date=search_date,
        cover_entity_name=esc(entity_name),
        cover_acn=esc(formatted_acn),
        cover_document_id=search_number,

        search_date=search_date_time,
        total_security_interests=f"{len(active)} active registrations",
        search_status=search_status,
        security_breakdown=_security_breakdown(len(blankets), len(vehicles)),
        secured_parties_rows=_secured_party_rows(registrations, vehicles, blankets),
        page_number_2=page_of(2, total_pages),

        critical_security_section=_critical_security(blankets[0] if blankets else None),
        vehicle_finance_count=len(vehicles),
        vehicle_finance_financiers_count=len({v.get("securedPartySummary") for v in vehicles}),
        vehicle_expiry_timeline=_expiry_timeline(vehicles),
        page_number_3=page_of(3, total_pages),

        registration_pages=pages,
        search_number=search_number,
        grantor_name=esc(entity_name),
        secured_party_contacts_rows=_contact_rows(registrations),
        page_number_glossary=page_of(glossary_page, total_pages),
        page_number_document_info=page_of(glossary_page + 1, total_pages),
        total_pages=total_pages,

        company_type="ppsr",
        acn=formatted_acn or NA,
        abn=entity_abn or NA,
        companyName=esc(entity_name),
    )
