"""ASIC current & historical extract: the current report plus three history pages."""

from src.utils.formatters import SLASH_DATE, format_currency, format_date, to_number
from src.utils.payload import as_list, first_dict, first_non_empty

from .asic_current import (
    CEASED, extract_asic_current_data, extract_records, flat_address, is_ceased,
)
from .common import ReportFields, empty_row, esc, esc_first, page_of, resolve_now, sort_by_date, table_row

TOTAL_PAGES = 11


def _former_name_rows(entity) -> str:
    names = as_list(entity.get("former_names"))
    effective_from = format_date(
        first_non_empty(entity.get("name_start_at"), entity.get("asic_date_of_registration")), SLASH_DATE
    )
    rows = []
    for index, name in enumerate(names):
        if index == 0 and entity.get("name"):
            effective_to = "Current"
        else:
            effective_to = format_date(
                first_non_empty(entity.get("name_end_at"), entity.get("name_start_at")), SLASH_DATE
            )
        rows.append(table_row(esc(name), effective_from, effective_to, "Name Change"))
    return "".join(rows) or empty_row("No former company names found", 4)


def _address_rows(addresses) -> str:
    ceased = sort_by_date([a for a in addresses if is_ceased(a)], "end_date", "start_date")
    rows = [
        table_row(
            flat_address(a),
            esc(a.get("type")),
            format_date(a.get("start_date"), SLASH_DATE),
            format_date(a.get("end_date"), SLASH_DATE, default="Current"),
        )
        for a in ceased
    ]
    return "".join(rows) or empty_row("No historical registered addresses found", 4)


def _officeholder_rows(directors, secretaries) -> str:
    holders = [(d, "Director") for d in directors if is_ceased(d)]
    holders += [(s, "Secretary") for s in secretaries if is_ceased(s)]
    ordered = sort_by_date([h for h, _ in holders], "end_date", "start_date")
    positions = {id(h): p for h, p in holders}

    rows = [
        table_row(
            esc(holder.get("name")),
            positions[id(holder)],
            format_date(holder.get("start_date"), SLASH_DATE),
            format_date(holder.get("end_date"), SLASH_DATE, default="Current"),
            "Resigned" if holder.get("end_date") else "N/A",
        )
        for holder in ordered
    ]
    return "".join(rows) or empty_row("No former directors or secretaries found", 5)


def _shareholder_rows(shareholders, shareholdings) -> str:
    historic = [
        h for h in shareholders + shareholdings
        if h.get("status") == CEASED or (not h.get("status") and h.get("end_date"))
    ]
    rows = [
        table_row(
            esc(h.get("name")),
            esc_first(h.get("class"), h.get("share_class")),
            esc(first_non_empty(h.get("number_held"), h.get("shares")), "0"),
            esc(h.get("document_number")),
            esc(h.get("status"), CEASED),
        )
        for h in historic
    ]
    return "".join(rows) or empty_row("No historical shareholder data available", 5)


def _share_structure_rows(structures) -> str:
    rows = []
    for s in sort_by_date(structures, "effective_date", "start_date", "document_date"):
        paid = to_number(first_non_empty(s.get("amount_paid"), s.get("total_paid"))) or 0.0
        rows.append(table_row(
            format_date(first_non_empty(s.get("effective_date"), s.get("start_date"), s.get("document_date")), SLASH_DATE),
            esc_first(s.get("class_code"), s.get("class"), s.get("class_description")),
            esc(first_non_empty(s.get("share_count"), s.get("number_issued")), "0"),
            format_currency(paid / 100) if paid > 0 else "$0.00",
            esc(s.get("change_type"), "Capital Increase"),
        ))
    return "".join(rows) or empty_row("No historical share structure changes found", 5)


def extract_asic_historical_data(data, business=None, report_type=None, now=None) -> ReportFields:
    now = resolve_now(now)
    fields = extract_asic_current_data(data, business, report_type, now=now, force_historical=True)

    rdata = data.get("rdata") if isinstance(data.get("rdata"), dict) else data
    entity = first_dict(rdata.get("entity"), data.get("entity"))
    extracts = [
        e for e in as_list(first_non_empty(rdata.get("asic_extracts"), data.get("asic_extracts")))
        if isinstance(e, dict)
    ]
    extract = extracts[0] if extracts else {}
    structures = extract_records(extract, "share_structures")

    extract_date = first_non_empty(extract.get("created_at"), entity.get("asic_date_of_registration"), default=now)

    fields.update({
        "company_type": "asic-historical",
        "cover_report_title": "ASIC Current &amp; Historical Report",
        "historical_extract_date": format_date(extract_date, SLASH_DATE),
        "historical_company_names_rows": _former_name_rows(entity),
        "historical_addresses_rows": _address_rows(extract_records(extract, "addresses")),
        "previous_officeholders_rows": _officeholder_rows(
            extract_records(extract, "directors"), extract_records(extract, "secretaries")
        ),
        "historical_shareholders_rows": _shareholder_rows(
            extract_records(extract, "shareholders"), extract_records(extract, "shareholdings")
        ),
        "historical_share_structure_rows": _share_structure_rows(structures),
    })
    for number in (1, 2, 3, 4, 5, 7, 9, 10, 11):
        fields[f"page_number_{number}"] = page_of(number, TOTAL_PAGES)
    fields["page_number_8"] = page_of(8, TOTAL_PAGES) if structures else ""
    fields["total_pages"] = TOTAL_PAGES
    return fields
