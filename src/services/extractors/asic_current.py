"""ASIC current company extract."""

from __future__ import annotations

from typing import Any, Dict, List

from src.utils.formatters import (
    NA, LONG_DATE, SHORT_DATE, SLASH_DATE, format_acn, format_clock, format_currency,
    format_date, format_time, parse_date, to_number, utc,
)
from src.utils.payload import as_list, dig, first_dict, first_non_empty, is_empty, records

from .common import (
    COURT_PLACEHOLDERS, ReportFields, empty_row, esc, esc_first, page_of, resolve_now,
    sort_by_date, table_row,
)

COMBINED_TYPES = ("Current & Historical", "Current and Historical")

CURRENT = "Current"
CEASED = "Ceased"

DOCUMENT_DATE_KEYS = ("received_at", "effective_at", "processed_at")


# ── Record helpers (shared with the historical extract) ──────────────────────


def is_ceased(record: Dict[str, Any]) -> bool:
    return record.get("status") == CEASED


def is_ceased_holding(record: Dict[str, Any]) -> bool:
    return record.get("status") == CEASED or not is_empty(record.get("end_date"))


def is_current_holding(record: Dict[str, Any]) -> bool:
    return record.get("status") == CURRENT or (
        is_empty(record.get("status")) and is_empty(record.get("end_date"))
    )


def nested_address(record: Dict[str, Any]) -> str:
    """Officeholder / shareholder ``address.address`` text, escaped."""
    address = record.get("address")
    if isinstance(address, dict):
        return esc(address.get("address"))
    return esc(address)


def flat_address(record: Dict[str, Any]) -> str:
    """Registered-address text: ``address`` or its parts on one line."""
    if not is_empty(record.get("address")) and not isinstance(record.get("address"), dict):
        return esc(record.get("address"))
    parts = [record.get("address_1"), record.get("suburb"), record.get("state"), record.get("postcode")]
    return esc(" ".join(str(p) for p in parts if not is_empty(p)).strip())


def extract_records(extract: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    return records(extract.get(key))


def detect_combined(extract: Dict[str, Any]) -> bool:
    """
    Current & Historical classification.

    The extract type is authoritative when it says so; otherwise any ceased
    record promotes a "Current" extract to a combined one.
    """
    if extract.get("type") in COMBINED_TYPES:
        return True
    addresses = extract_records(extract, "addresses") + extract_records(extract, "contact_addresses")
    if any(is_ceased(a) for a in addresses):
        return True
    if any(is_ceased(d) for d in extract_records(extract, "directors")):
        return True
    if any(is_ceased(s) for s in extract_records(extract, "secretaries")):
        return True
    holders = extract_records(extract, "shareholders") + extract_records(extract, "shareholdings")
    return any(is_ceased_holding(h) for h in holders)


# ── Cards ────────────────────────────────────────────────────────────────────


def _address_card(addr: Dict[str, Any]) -> str:
    lines = []
    if addr.get("care_of"):
        lines.append(f"'{esc(addr['care_of'])}'")
    if addr.get("address_1"):
        lines.append(esc(addr["address_1"]))
    if addr.get("address_2"):
        lines.append(f"'{esc(addr['address_2'])}'")
    if addr.get("suburb"):
        lines.append(esc(addr["suburb"]))
    if addr.get("state") and addr.get("postcode"):
        lines.append(f"{esc(addr['state'])} {esc(addr['postcode'])}")

    name_line = f"<strong>Name:</strong> {esc(addr['care_of'])}<br>" if addr.get("care_of") else ""
    return (
        '<div class="card">'
        f'<div class="card-header">{esc(addr.get("type"), "Address")}</div>'
        '<div class="card-body">'
        f"{name_line}<strong>Address:</strong><br>{'<br>'.join(lines)}<br><br>"
        f"<strong>Start Date:</strong> {format_date(addr.get('start_date'), SLASH_DATE)}<br>"
        f"<strong>Document No:</strong> {esc(addr.get('document_number'))}"
        "</div></div>"
    )


def _contact_address_card(addr: Dict[str, Any]) -> str:
    parts = [addr.get("address_1"), addr.get("address_2"), addr.get("suburb")]
    if addr.get("state") and addr.get("postcode"):
        parts.append(f"{addr['state']} {addr['postcode']}")
    text = esc(" ".join(str(p) for p in parts if not is_empty(p)), "")
    end = format_date(addr.get("end_date"), SLASH_DATE, default=CURRENT)
    return (
        '<div class="card info">'
        '<div class="card-header">Contact Address for ASIC</div>'
        '<div class="card warning small">This address is to be used by ASIC and not for delivery of '
        "documents to the company</div>"
        f'<div class="contact-address">{text}</div>'
        '<div class="muted-small">'
        f"<strong>Type:</strong> {esc(addr.get('type'), 'Contact Address for ASIC use only')}<br>"
        f"<strong>Start Date:</strong> {format_date(addr.get('start_date'), SLASH_DATE)} | "
        f"<strong>End Date:</strong> {end}"
        "</div></div>"
    )


def _status_badge(status: Any) -> str:
    if status == CURRENT:
        return '<span class="risk-low">Current</span>'
    return '<span class="risk-high">Ceased</span>'


def _officeholder_card(role: str, record: Dict[str, Any]) -> str:
    return (
        '<div class="card compact">'
        f'<div class="card-header">{role}</div>'
        '<div class="card-body">'
        f"<strong>{esc(record.get('name'))}</strong><br>"
        f"Appointment Date: {format_date(record.get('start_date'), SLASH_DATE)} | "
        f"Address: {nested_address(record)}<br>"
        f"Status: {_status_badge(record.get('status'))}"
        "</div></div>"
    )


def _shareholder_cards(shareholders: List[Dict[str, Any]], shareholdings: List[Dict[str, Any]]) -> str:
    cards = []
    if shareholders:
        for holder in shareholders:
            cards.append(
                '<div class="card compact"><div class="card-header">Shareholder</div>'
                f"<div class=\"card-body\"><strong>{esc(holder.get('name'))}</strong><br>"
                f"Address: {nested_address(holder)}</div></div>"
            )
        return "".join(cards)

    groups: Dict[str, List[Dict[str, Any]]] = {}
    for holding in shareholdings:
        groups.setdefault(holding.get("name") or "Unknown", []).append(holding)

    for name, holdings in groups.items():
        shares = " | ".join(
            f"{esc(h.get('share_class'))}: {esc(first_non_empty(h.get('shares'), default=0))} shares"
            for h in holdings
        )
        cards.append(
            '<div class="card compact"><div class="card-header">Shareholder</div>'
            f'<div class="card-body"><strong>{esc(name)}</strong><br>{shares}</div></div>'
        )
    return "".join(cards)


# ── Documents ────────────────────────────────────────────────────────────────


def _document_stats(documents: List[Dict[str, Any]], year: int) -> Dict[str, Any]:
    years = []
    form_codes = set()
    for doc in documents:
        dt = parse_date(first_non_empty(*(doc.get(k) for k in DOCUMENT_DATE_KEYS)))
        if dt is not None:
            years.append(dt.year)
        if doc.get("form_code"):
            form_codes.add(doc["form_code"])
    return {
        "total": len(documents),
        "range": f"{min(years)}-{max(years)}" if years else NA,
        "this_year": sum(1 for y in years if y == year),
        "form_types": len(form_codes),
    }


def _document_rows(documents: List[Dict[str, Any]]) -> str:
    rows = []
    for doc in sort_by_date(documents, *DOCUMENT_DATE_KEYS):
        date = first_non_empty(*(doc.get(k) for k in DOCUMENT_DATE_KEYS))
        rows.append(table_row(
            f"<strong>{esc(doc.get('form_code'))}</strong>",
            esc(doc.get("description")),
            format_date(date, SLASH_DATE),
            esc(doc.get("document_number")),
        ))
    return "".join(rows) or empty_row("No ASIC documents found", 4)


# ── Officeholders and ownership ──────────────────────────────────────────────


def _officeholder_rows(directors: List[Dict[str, Any]], secretaries: List[Dict[str, Any]]) -> str:
    current_directors = [d for d in directors if d.get("status") == CURRENT]
    current_secretaries = [s for s in secretaries if s.get("status") == CURRENT]
    secretary_names = {s.get("name") or "" for s in current_secretaries}

    holders = []
    seen = set()
    for director in current_directors:
        name = director.get("name") or ""
        if name in seen:
            continue
        position = "Director & Secretary" if name in secretary_names else "Director"
        holders.append((director, position))
        seen.add(name)
    for secretary in current_secretaries:
        name = secretary.get("name") or ""
        if name not in seen:
            holders.append((secretary, "Secretary"))
            seen.add(name)

    rows = [
        table_row(
            f"<strong>{esc(holder.get('name'))}</strong>",
            position,
            format_date(holder.get("start_date"), SLASH_DATE),
            nested_address(holder),
            format_date(holder.get("dob"), SLASH_DATE),
            esc(holder.get("place_of_birth")),
        )
        for holder, position in holders
    ]
    return "".join(rows) or empty_row("No current officeholders found", 6)


def _share_count(value: Any) -> int:
    number = to_number(value)
    return int(number) if number is not None else 0


def _fully_paid(value: Any) -> str:
    if value is True or value == "Yes":
        return "Yes"
    if value is False or value == "No":
        return "No"
    return NA


def _paid_amount(structure: Dict[str, Any], *keys: str) -> float:
    amount = to_number(first_non_empty(*(structure.get(k) for k in keys)))
    return amount or 0.0


def _ownership(shareholders, shareholdings, structures) -> Dict[str, Any]:
    names = {h.get("name") for h in shareholdings + shareholders if h.get("name")}
    holder_count = len(names) or len(shareholders) or len(shareholdings)

    classes = set()
    for s in structures:
        classes.update(v for v in (s.get("class_code"), s.get("class")) if v)
    for h in shareholdings:
        classes.update(v for v in (h.get("share_class"), h.get("class")) if v)
    for h in shareholders:
        if h.get("class"):
            classes.add(h["class"])

    per_holder: Dict[str, int] = {}
    total_shares = 0
    for h in shareholders:
        shares = _share_count(first_non_empty(h.get("number_held"), h.get("shares")))
        total_shares += shares
        name = h.get("name") or "Unknown"
        per_holder[name] = per_holder.get(name, 0) + shares
    for h in shareholdings:
        shares = _share_count(first_non_empty(h.get("shares"), h.get("number_held")))
        total_shares += shares
        name = h.get("name") or "Unknown"
        per_holder[name] = per_holder.get(name, 0) + shares

    concentration = NA
    if total_shares > 0:
        concentration = f"{round(max(per_holder.values()) / total_shares * 100)}%"

    # Paid amounts are recorded in cents
    capital = sum(_paid_amount(s, "amount_paid", "total_paid", "total_paid_up") / 100 for s in structures)

    register = shareholders if shareholders else shareholdings
    rows = [
        table_row(
            f"<strong>{esc(h.get('name'))}</strong>",
            nested_address(h),
            esc_first(h.get("class"), h.get("share_class")),
            esc(first_non_empty(h.get("number_held"), h.get("shares")), "0"),
            _fully_paid(h.get("fully_paid")),
            esc(h.get("document_number")),
        )
        for h in register
    ]
    return {
        "shareholders_total": holder_count,
        "share_classes_count": len(classes),
        "ownership_concentration": concentration,
        "share_capital": format_currency(capital) if capital > 0 else NA,
        "share_register_rows": "".join(rows) or empty_row("No shareholders recorded", 6),
    }


def _share_structure_rows(structures: List[Dict[str, Any]]) -> str:
    rows = []
    for s in structures:
        paid = _paid_amount(s, "amount_paid", "total_paid")
        rows.append(table_row(
            f"<strong>{esc_first(s.get('class_code'), s.get('class'))}</strong>",
            esc_first(s.get("class_description"), s.get("description")),
            esc(first_non_empty(s.get("share_count"), s.get("number_issued")), "0"),
            format_currency(paid / 100) if paid > 0 else "$0.00",
            esc(s.get("document_number")),
        ))
    return "".join(rows)


# ── Extractor ────────────────────────────────────────────────────────────────


def extract_asic_current_data(
    data, business=None, report_type=None, now=None, force_historical: bool = False
) -> ReportFields:
    now = resolve_now(now)
    rdata = data.get("rdata") if isinstance(data.get("rdata"), dict) else data
    entity = first_dict(rdata.get("entity"), data.get("entity"))

    acn = format_acn(entity.get("acn")) or NA
    abn = format_acn(entity.get("abn")) or NA
    name = entity.get("name")

    # ── Tax debt ─────────────────────────────────────────────────────
    debt = rdata.get("current_tax_debt") if isinstance(rdata.get("current_tax_debt"), dict) else {}
    has_tax_debt = debt.get("amount") is not None and to_number(debt.get("amount")) is not None
    tax_debt_amount = format_currency(debt.get("amount")) if has_tax_debt else NA
    tax_debt_updated = NA
    if has_tax_debt and debt.get("ato_updated_at"):
        updated = parse_date(debt["ato_updated_at"])
        if updated is not None:
            updated = utc(updated)
            tax_debt_updated = f"{updated.strftime(SLASH_DATE)} at {format_clock(updated, seconds=True)}"

    asic_status = esc_first(entity.get("asic_status"), data.get("asic_status"))
    abn_status = esc_first(entity.get("abr_status"), data.get("abn_status"))
    gst_status = esc_first(entity.get("abr_gst_status"), data.get("abn_gst_status"))
    document_number = esc_first(entity.get("document_number"), data.get("document_number"))

    # ── Extract collections ──────────────────────────────────────────
    extracts = [
        e for e in as_list(first_non_empty(rdata.get("asic_extracts"), data.get("asic_extracts")))
        if isinstance(e, dict)
    ]
    extract = extracts[0] if extracts else {}
    extract_type = "Current & Historical" if force_historical else (extract.get("type") or CURRENT)

    addresses = extract_records(extract, "addresses")
    contact_addresses = extract_records(extract, "contact_addresses")
    directors = extract_records(extract, "directors")
    secretaries = extract_records(extract, "secretaries")
    shareholders = extract_records(extract, "shareholders")
    shareholdings = extract_records(extract, "shareholdings")
    structures = extract_records(extract, "share_structures")
    documents = extract_records(extract, "documents")

    combined = force_historical or detect_combined(extract)

    # ── Counts ───────────────────────────────────────────────────────
    all_addresses = addresses + contact_addresses
    if combined:
        holders = shareholders + shareholdings
        current_counts = {
            "addresses": sum(1 for a in all_addresses if a.get("status") == CURRENT),
            "directors": sum(1 for d in directors if d.get("status") == CURRENT),
            "secretaries": sum(1 for s in secretaries if s.get("status") == CURRENT),
            "shareholders": sum(1 for h in holders if is_current_holding(h)),
        }
        historic_counts = {
            "addresses": sum(1 for a in all_addresses if is_ceased(a)),
            "directors": sum(1 for d in directors if is_ceased(d)),
            "secretaries": sum(1 for s in secretaries if is_ceased(s)),
            "shareholders": sum(1 for h in holders if is_ceased_holding(h)),
        }
        totals = {k: current_counts[k] + historic_counts[k] for k in current_counts}
    else:
        totals = {
            "addresses": len(all_addresses),
            "directors": len(directors),
            "secretaries": len(secretaries),
            "shareholders": len(shareholders) or len(shareholdings),
        }
        current_counts = dict(totals)
        historic_counts = {k: 0 for k in totals}

    # ── Addresses ────────────────────────────────────────────────────
    current_addresses = [a for a in addresses if a.get("status") == CURRENT]
    summary_addresses = current_addresses[:2] if len(current_addresses) >= 2 else addresses[:2]
    address_boxes = "".join(_address_card(a) for a in summary_addresses)
    contact_section = _contact_address_card(contact_addresses[0]) if contact_addresses else ""

    history_rows = "".join(
        table_row(
            flat_address(a),
            format_date(first_non_empty(a.get("end_date"), a.get("start_date")), SLASH_DATE),
            esc(a.get("document_number")),
        )
        for a in [a for a in addresses if is_ceased(a)][:2]
    ) or empty_row("No address changes recorded", 3)

    stats = _document_stats(documents, now.year)
    ownership = _ownership(shareholders, shareholdings, structures)
    has_structures = bool(structures)
    has_shareholder_data = bool(shareholders or shareholdings or structures)

    total_pages = 8 if has_structures else 7

    fields = ReportFields(
        company_type="asic-current",
        acn=acn,
        abn=abn,
        companyName=esc(name),

        cover_company_name=esc(str(name).upper() if name else None),
        cover_report_title="ASIC Current Report",
        cover_report_date=now.strftime(LONG_DATE),
        cover_acn=esc(acn),
        cover_abn=esc(abn),
        cover_document_number=document_number,

        entity_name=esc(name),
        entity_abn=esc(abn),
        entity_acn=esc(acn),
        entity_asic_status=asic_status,
        entity_abn_status=abn_status,
        entity_gst_status=gst_status,
        entity_organisation_type=esc(entity.get("organisation_type")),
        entity_asic_date_of_registration=format_date(entity.get("asic_date_of_registration"), SLASH_DATE),
        entity_review_date=format_date(entity.get("review_date"), SLASH_DATE),
        entity_registered_in=esc(entity.get("registered_in")),
        report_date=f"{now.strftime(SHORT_DATE)}, {format_time(now)}",
        current_tax_debt_amount=tax_debt_amount,
        current_tax_debt_ato_updated_at=tax_debt_updated,

        extract_report_type=esc(extract_type),
        extract_addresses_count=totals["addresses"],
        extract_directors_count=totals["directors"],
        extract_secretaries_count=totals["secretaries"],
        extract_shareholders_count=totals["shareholders"],
        extract_current_addresses_count=current_counts["addresses"],
        extract_historic_addresses_count=historic_counts["addresses"],
        extract_current_directors_count=current_counts["directors"],
        extract_historic_directors_count=historic_counts["directors"],
        extract_current_secretaries_count=current_counts["secretaries"],
        extract_historic_secretaries_count=historic_counts["secretaries"],
        extract_current_shareholders_count=current_counts["shareholders"],
        extract_historic_shareholders_count=historic_counts["shareholders"],
        is_current_and_historical="true" if combined else "false",
        address_boxes=address_boxes,
        contact_address_section=contact_section,

        address_change_history_rows=history_rows,
        directors_summary="".join(_officeholder_card("Director", d) for d in directors),
        secretaries_summary="".join(_officeholder_card("Secretary", s) for s in secretaries),
        shareholders_summary=_shareholder_cards(shareholders, shareholdings),

        documents_total_count=stats["total"],
        documents_date_range=stats["range"],
        documents_current_year=now.year,
        documents_current_year_filings=stats["this_year"],
        documents_form_types_count=stats["form_types"],
        documents_table_rows=_document_rows(documents),

        directors_secretaries_table_rows=_officeholder_rows(directors, secretaries),
        share_structure_rows=_share_structure_rows(structures),

        page_number_1=page_of(1, total_pages),
        page_number_2=page_of(2, total_pages),
        page_number_3=page_of(3, total_pages),
        page_number_4=page_of(4, total_pages),
        page_number_5=page_of(5, total_pages),
        page_number_7=page_of(7, total_pages),
        page_number_8=page_of(8, total_pages) if has_structures else "",
        total_pages=total_pages,

        entity_abr_gst_status=gst_status,
        entity_document_number=document_number,
        abn_state=esc_first(data.get("abn_state"), entity.get("abr_state")),
        abn_status=abn_status,
    )
    fields.update(ownership)
    fields.update(COURT_PLACEHOLDERS)

    fields.section("tax_debt", has_tax_debt)
    fields.section("combined_summary", combined)
    fields.section("current_summary", not combined)
    fields.section("contact_address", bool(contact_addresses))
    fields.section("shareholders", has_shareholder_data)
    fields.section("share_structure", has_structures)
    return fields
