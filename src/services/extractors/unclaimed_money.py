from src.utils.formatters import NA, LONG_DATE, format_currency, to_number
from src.utils.payload import first_non_empty, pick, record_list

from ..search_term import resolve_search_word
from .common import ReportFields, address_line, empty_row, esc, esc_first, resolve_now, table_row


def extract_unclaimed_money_data(data, business=None, report_type=None, now=None) -> ReportFields:
    now = resolve_now(now)
    rdata = data.get("rdata") if isinstance(data.get("rdata"), dict) else data
    results = record_list(pick(rdata, "results", "records", "items", default=[]))

    rows = []
    total = 0.0
    for record in results:
        amount = to_number(record.get("amount"))
        total += amount or 0.0
        rows.append(table_row(
            esc(record.get("name")),
            format_currency(amount),
            esc_first(record.get("type"), record.get("moneyType")),
            esc_first(record.get("organisation"), record.get("holder")),
            esc(record.get("state")),
            address_line(first_non_empty(record.get("address"), record.get("lastKnownAddress"))),
            esc_first(record.get("year"), record.get("yearLodged")),
            esc_first(record.get("reference"), record.get("id")),
        ))

    search_name = first_non_empty(
        rdata.get("searchName"), rdata.get("name"), resolve_search_word(business, report_type),
        pick(business, "Name", "name"), default=NA,
    )

    fields = ReportFields(
        search_name=esc(search_name),
        report_date=now.strftime(LONG_DATE),
        unclaimed_records_count=len(results),
        unclaimed_total_amount=format_currency(total),
        unclaimed_money_rows="".join(rows) or empty_row("No unclaimed money records found", 8),
        company_type="unclaimed-money",
        companyName=esc(search_name),
        acn=NA,
        abn=NA,
    )
    fields.section("results", bool(results))
    return fields
