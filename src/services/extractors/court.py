from src.utils.formatters import NA, format_acn, format_date, format_datetime, format_time, time_ago
from src.utils.payload import dig, first_non_empty, records

from .common import (
    TAX_DEBT_PLACEHOLDERS, ReportFields, empty_row, entity_fields, esc, esc_first,
    resolve_now, table_row,
)


def _action_row(index: int, date, name, court, case_type, number, now) -> str:
    ago = time_ago(date, now)
    when = format_date(date)
    if ago:
        when += f'<br><span class="muted-small">({ago})</span>'
    return table_row(index, when, name, court, case_type, number)


def extract_court_data(data, business=None, report_type=None, now=None) -> ReportFields:
    now = resolve_now(now)
    insolvencies = records(data.get("insolvencies"))
    cases = records(data.get("cases"))
    insolvency = insolvencies[0] if insolvencies else None
    case = cases[0] if cases else None

    if case:
        case_number = esc_first(case.get("case_number"), case.get("case_name"))
    elif insolvency:
        case_number = esc_first(insolvency.get("case_number"), insolvency.get("asic_notice_id"))
    else:
        case_number = NA

    # ── Action summary ───────────────────────────────────────────────
    rows = []
    if insolvency:
        date = first_non_empty(
            insolvency.get("notification_time"), insolvency.get("date_filed"), insolvency.get("created_at")
        )
        rows.append(_action_row(
            len(rows) + 1, date,
            esc_first(insolvency.get("match_on"), insolvency.get("name")),
            esc_first(insolvency.get("court_name"), insolvency.get("court"), default="ASIC Insolvencies"),
            esc_first(insolvency.get("case_type"), insolvency.get("type")),
            esc_first(insolvency.get("case_number"), insolvency.get("asic_notice_id")),
            now,
        ))
    if case:
        date = first_non_empty(case.get("notification_time"), case.get("most_recent_event"), case.get("created_at"))
        rows.append(_action_row(
            len(rows) + 1, date,
            esc_first(case.get("match_on"), case.get("name")),
            esc_first(case.get("court_name"), case.get("source")),
            esc_first(case.get("case_type"), case.get("type")),
            esc_first(case.get("case_number"), case.get("case_name")),
            now,
        ))
    action_rows = "".join(rows) or empty_row("No court or insolvency actions found", 6)

    # ── Insolvency ───────────────────────────────────────────────────
    insolvency = insolvency or {}
    parties = records(insolvency.get("parties"))
    if parties:
        insolvency_parties = "".join(
            table_row(esc(p.get("name"), ""), esc(format_acn(p.get("acn")), "")) for p in parties
        )
    elif insolvency:
        insolvency_parties = table_row(esc(insolvency.get("name")), "")
    else:
        insolvency_parties = ""

    # ── Case ─────────────────────────────────────────────────────────
    case = case or {}
    orders = "".join(
        table_row(f"<strong>{format_date(j.get('date'))}</strong>", f"<strong>Title:</strong> {esc(j.get('title'), '')}")
        for j in records(case.get("judgments"))
    )
    case_parties = "".join(
        table_row(
            esc(p.get("name"), ""),
            esc(p.get("role"), ""),
            esc_first(p.get("representative_firm"), p.get("representative_name"), default=""),
            esc(format_acn(p.get("acn")), ""),
        )
        for p in records(case.get("parties"))
    )
    hearings = "".join(
        table_row(
            format_datetime(h.get("datetime")),
            esc(h.get("officer"), ""),
            esc(h.get("court_room"), ""),
            esc(h.get("court_name"), ""),
            esc(h.get("type"), ""),
            esc(h.get("outcome"), ""),
        )
        for h in records(case.get("hearings"))
    )
    documents = "".join(
        table_row(
            format_date(d.get("datetime")),
            format_time(d.get("datetime")),
            esc(d.get("title"), ""),
            esc(d.get("filed_by"), ""),
        )
        for d in records(case.get("documents"))
    )

    next_hearing = case.get("next_hearing_date")

    fields = ReportFields(company_type="court")
    fields.update(entity_fields(data))
    fields.update({
        "actionSummaryRows": action_rows,
        "insolvency_notice_id": esc_first(insolvency.get("asic_notice_id"), insolvency.get("case_number")),
        "insolvency_type": esc_first(insolvency.get("case_type"), insolvency.get("type")),
        "insolvency_publish_date": format_date(first_non_empty(
            insolvency.get("notification_time"), insolvency.get("date_filed"), insolvency.get("created_at")
        )),
        "insolvency_status": esc(insolvency.get("status")),
        "insolvency_appointee": esc(dig(parties, 0, "name")),
        "insolvency_parties_rows": insolvency_parties,
        "insolvency_court": esc_first(insolvency.get("court_name"), insolvency.get("court"), default="ASIC Insolvencies"),
        "case_case_id": esc_first(case.get("case_number"), case.get("case_name")),
        "case_source": esc_first(case.get("court_name"), case.get("source")),
        "case_jurisdiction": esc(case.get("jurisdiction")),
        "case_type": esc_first(case.get("case_type"), case.get("type")),
        "case_status": esc(dig(case, "applications", 0, "status")),
        "case_location": esc_first(case.get("suburb"), case.get("registered_in")),
        "case_most_recent_event": format_date(first_non_empty(
            case.get("most_recent_event"), case.get("last_event"), case.get("updated_at")
        )),
        "case_notification_date": format_date(first_non_empty(
            case.get("notification_time"), dig(case, "applications", 0, "date_filed"), case.get("created_at")
        )),
        "case_next_event": format_date(next_hearing) if next_hearing else NA,
        "orders_rows": orders or empty_row("No orders recorded", 2),
        "case_parties_rows": case_parties or empty_row("No parties recorded", 4),
        "hearings_rows": hearings or empty_row("No hearings recorded", 6),
        "documents_rows": documents or empty_row("No documents recorded", 4),
        "caseNumber": case_number,
    })
    fields.update(TAX_DEBT_PLACEHOLDERS)
    fields.section("insolvency", bool(insolvency)).section("case", bool(case))
    return fields
