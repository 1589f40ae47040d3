"""Building blocks shared by the per-report extractors."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from src.utils.formatters import NA, SLASH_DATE, escape_html, format_date, parse_date
from src.utils.payload import first_non_empty, is_empty


class ReportFields(dict):
    """
    Flat placeholder → value mapping produced by an extractor.

    ``sections`` names the optional template blocks the report enables or
    drops (``<!-- section:name -->`` markers in the template).
    """

    def __init__(self, *args, sections: Optional[Dict[str, bool]] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.sections: Dict[str, bool] = dict(sections or {})

    def section(self, name: str, enabled: Any) -> "ReportFields":
        self.sections[name] = bool(enabled)
        return self


# ── Text ──────────────────────────────────────────────────────────────────────


def esc(value: Any, default: str = NA) -> str:
    """Escaped display text, or *default* for blank values."""
    if is_empty(value):
        return default
    return escape_html(value)


def esc_first(*values: Any, default: str = NA) -> str:
    return esc(first_non_empty(*values), default=default)


def page_of(number: Any, total: Any) -> str:
    return f"Page {number} of {total}"


def plural(count: int, singular: str, plural_form: Optional[str] = None) -> str:
    return singular if count == 1 else (plural_form or f"{singular}s")


# ── HTML fragments ────────────────────────────────────────────────────────────


def table_row(*cells: Any, style: str = "") -> str:
    """One ``<tr>``; cells are inserted as-is (escape before calling)."""
    attr = f' style="{style}"' if style else ""
    return f"<tr{attr}>" + "".join(f"<td>{c}</td>" for c in cells) + "</tr>"


def empty_row(message: str, colspan: int) -> str:
    return f'<tr><td colspan="{colspan}" class="empty-row">{message}</td></tr>'


def data_item(label: str, value: Any, wide: bool = False) -> str:
    cls = "data-item wide" if wide else "data-item"
    return (
        f'<div class="{cls}"><div class="data-label">{label}</div>'
        f'<div class="data-value">{value}</div></div>'
    )


def empty_block(message: str = "No data available") -> str:
    return f'<div class="empty-block">{message}</div>'


def list_items(items: Iterable[str]) -> str:
    return "".join(f"<li>{item}</li>" for item in items)


def address_line(value: Any, default: str = NA) -> str:
    """Escaped one-line address from a string or an ASIC address object."""
    if isinstance(value, dict):
        if not is_empty(value.get("address")):
            return esc(value["address"], default)
        parts = [value.get(k) for k in ("address_1", "address_2", "suburb", "state", "postcode")]
        return esc(" ".join(str(p).strip() for p in parts if not is_empty(p)), default)
    return esc(value, default)


# ── Dates and ordering ────────────────────────────────────────────────────────


def _timestamp(dt: datetime) -> float:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def date_key(item: Dict[str, Any], *keys: str) -> Optional[datetime]:
    if not isinstance(item, dict):
        return None
    return parse_date(first_non_empty(*(item.get(k) for k in keys)))


def sort_by_date(items: List[Dict[str, Any]], *keys: str, newest_first: bool = True) -> List[Dict[str, Any]]:
    """
    Order records by the first parseable date among *keys*.

    Records without a date always sort after dated ones.
    """
    dated = []
    undated = []
    for item in items:
        dt = date_key(item, *keys)
        if dt is None:
            undated.append(item)
        else:
            dated.append((_timestamp(dt), item))
    dated.sort(key=lambda pair: pair[0], reverse=newest_first)
    return [item for _, item in dated] + undated


def is_after(value: Any, moment: datetime) -> bool:
    """True when *value* parses to a date later than *moment*."""
    dt = parse_date(value)
    if dt is None:
        return False
    return _timestamp(dt) > _timestamp(moment)


def resolve_now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now()


# ── Shared entity block (ATO / court / fallback reports) ──────────────────────

COURT_PLACEHOLDERS: Dict[str, str] = {
    "actionSummaryRows": "",
    "insolvency_notice_id": NA,
    "insolvency_type": NA,
    "insolvency_publish_date": NA,
    "insolvency_status": NA,
    "insolvency_appointee": NA,
    "insolvency_parties_rows": "",
    "insolvency_court": NA,
    "case_case_id": NA,
    "case_source": NA,
    "case_jurisdiction": NA,
    "case_type": NA,
    "case_status": NA,
    "case_location": NA,
    "case_most_recent_event": NA,
    "case_notification_date": NA,
    "case_next_event": NA,
    "orders_rows": "",
    "case_parties_rows": "",
    "hearings_rows": "",
    "documents_rows": "",
    "caseNumber": NA,
}

TAX_DEBT_PLACEHOLDERS: Dict[str, str] = {
    "current_tax_debt_amount": NA,
    "current_tax_debt_ato_updated_at": NA,
}


def entity_fields(data: Dict[str, Any]) -> Dict[str, str]:
    """Identity fields read from ``data.entity`` by the ABN/ACN based reports."""
    entity = data.get("entity") if isinstance(data.get("entity"), dict) else {}
    return {
        "acn": first_non_empty(data.get("acn"), entity.get("acn"), default=NA),
        "abn": first_non_empty(data.get("abn"), entity.get("abn"), default=NA),
        "companyName": esc(entity.get("name")),
        "entity_abn": esc(entity.get("abn")),
        "entity_acn": esc(entity.get("acn")),
        "entity_name": esc(entity.get("name")),
        "entity_review_date": format_date(entity.get("review_date"), SLASH_DATE),
        "entity_registered_in": esc(entity.get("registered_in")),
        "entity_abr_gst_status": esc(entity.get("abr_gst_status")),
        "entity_document_number": esc(entity.get("document_number")),
        "entity_organisation_type": esc(entity.get("organisation_type")),
        "entity_asic_date_of_registration": format_date(entity.get("asic_date_of_registration"), SLASH_DATE),
        "abn_state": esc(data.get("abn_state")),
        "abn_status": esc(data.get("abn_status")),
    }
