"""
IP Australia trademark search.

Each trademark becomes its own card with goods/services, owner,
address-for-service and history sub-tables.
"""

from __future__ import annotations

from typing import Any, Dict, List

from src.utils.formatters import NA, LONG_DATE, SHORT_DATE, format_acn, format_date
from src.utils.payload import first_non_empty, join_non_empty, pick, record_list

from ..search_term import resolve_search_word
from .common import ReportFields, data_item, empty_block, empty_row, esc, esc_first, resolve_now, sort_by_date, table_row

REGISTERED_STATUSES = ("registered", "registered: protected")


def _trademarks(rdata) -> List[Dict[str, Any]]:
    return record_list(pick(rdata, "trademarks", "results", "items", default=[]))


def _address_text(value) -> str:
    if isinstance(value, dict):
        return esc(join_non_empty(
            [value.get(k) for k in ("line1", "line2", "address", "suburb", "locality", "state", "postcode", "country")],
            sep=", ",
        ))
    return esc(value)


def _goods_rows(trademark) -> str:
    rows = []
    for item in record_list(pick(trademark, "goods_services", "goodsAndServices", "classes", default=[])):
        rows.append(table_row(
            esc_first(item.get("class"), item.get("classNumber")),
            esc_first(item.get("description"), item.get("goods")),
        ))
    return "".join(rows) or empty_row("No goods or services listed", 2)


def _owner_rows(trademark) -> str:
    rows = []
    for owner in record_list(pick(trademark, "owners", "applicants", default=[])):
        number = first_non_empty(owner.get("acn"), owner.get("abn"))
        rows.append(table_row(
            esc(owner.get("name")),
            esc(format_acn(number)) if number else NA,
            _address_text(owner.get("address")),
        ))
    return "".join(rows) or empty_row("No owners recorded", 3)


def _history_rows(trademark) -> str:
    history = record_list(pick(trademark, "history", "events", default=[]))
    rows = [
        table_row(format_date(first_non_empty(h.get("date"), h.get("eventDate")), SHORT_DATE),
                  esc_first(h.get("event"), h.get("description")))
        for h in sort_by_date(history, "date", "eventDate")
    ]
    return "".join(rows) or empty_row("No history recorded", 2)


def _trademark_section(trademark, index: int) -> str:
    number = esc_first(trademark.get("number"), trademark.get("trademarkNumber"), trademark.get("applicationNumber"))
    words = esc_first(trademark.get("words"), trademark.get("name"), trademark.get("title"))
    service = pick(trademark, "address_for_service", "addressForService", default={})
    service_name = esc(service.get("name")) if isinstance(service, dict) else NA

    details = "".join([
        data_item("Number", number),
        data_item("Status", esc(trademark.get("status"))),
        data_item("Type", esc_first(trademark.get("type"), trademark.get("kind"))),
        data_item("Lodgement Date", format_date(first_non_empty(
            trademark.get("lodgement_date"), trademark.get("lodgementDate")), LONG_DATE)),
        data_item("Registration Date", format_date(first_non_empty(
            trademark.get("registration_date"), trademark.get("registrationDate"), trademark.get("entered_on_register")),
            LONG_DATE)),
        data_item("Renewal Due", format_date(first_non_empty(
            trademark.get("renewal_due"), trademark.get("renewalDueDate")), LONG_DATE)),
    ])
    return (
        '<div class="card trademark">'
        f'<div class="card-header">Trademark {index}: {words}</div>'
        f'<div class="data-grid three-col">{details}</div>'
        '<div class="section-subtitle">Goods &amp; Services</div>'
        f"<table><thead><tr><th>Class</th><th>Description</th></tr></thead><tbody>{_goods_rows(trademark)}</tbody></table>"
        '<div class="section-subtitle">Owners</div>'
        "<table><thead><tr><th>Name</th><th>ACN / ABN</th><th>Address</th></tr></thead>"
        f"<tbody>{_owner_rows(trademark)}</tbody></table>"
        '<div class="section-subtitle">Address for Service</div>'
        f'<div class="text-sm">{service_name}<br>{_address_text(service.get("address") if isinstance(service, dict) else service)}</div>'
        '<div class="section-subtitle">History</div>'
        f"<table><thead><tr><th>Date</th><th>Event</th></tr></thead><tbody>{_history_rows(trademark)}</tbody></table>"
        "</div>"
    )


def extract_trademark_data(data, business=None, report_type=None, now=None) -> ReportFields:
    now = resolve_now(now)
    rdata = data.get("rdata") if isinstance(data.get("rdata"), dict) else data
    trademarks = _trademarks(rdata)

    registered = sum(1 for t in trademarks if str(t.get("status") or "").strip().lower() in REGISTERED_STATUSES)
    search_term = first_non_empty(
        rdata.get("searchTerm"), rdata.get("query"), resolve_search_word(business, report_type),
        pick(business, "Name", "name", "companyName"), default=NA,
    )
    sections = "".join(_trademark_section(t, i) for i, t in enumerate(trademarks, start=1))

    fields = ReportFields(
        search_term=esc(search_term),
        report_date=now.strftime(LONG_DATE),
        trademarks_total=len(trademarks),
        trademarks_registered=registered,
        trademarks_other=len(trademarks) - registered,
        trademark_sections=sections or empty_block("No trademarks found"),
        company_type="trademark",
        companyName=esc(search_term),
        acn=NA,
        abn=NA,
    )
    fields.section("trademarks", bool(trademarks))
    return fields
