"""AFSA National Personal Insolvency Index search result."""

from src.utils.formatters import NA, LONG_DATE, format_clock, format_date, to_number
from src.utils.payload import first_non_empty, join_non_empty, records

from ..search_term import resolve_search_word
from .common import (
    ReportFields, data_item, empty_row, esc, esc_first, list_items, page_of, plural,
    resolve_now, table_row,
)

TOTAL_PAGES = 4

CLEAR_STATUS = "✓ No Insolvency Records Found"
CLEAR_VERIFICATION = "CLEAR — No bankruptcy or personal insolvency on record"
CLEAR_ITEMS = (
    "Has not declared bankruptcy",
    "No debt agreements recorded",
    "No personal insolvency agreements on record",
    "Not subject to any registered insolvency proceedings",
)


def _insolvencies(rdata):
    """Records as a list of ``{"debtor": ..., ...}`` entries; a lone debtor is wrapped."""
    if isinstance(rdata.get("insolvencies"), list):
        return records(rdata["insolvencies"])
    debtor = rdata.get("debtor")
    if isinstance(debtor, dict):
        return [{
            "debtor": debtor,
            "extractId": first_non_empty(rdata.get("extractId"), rdata.get("uuid")),
            "uuid": first_non_empty(rdata.get("uuid"), rdata.get("extractId")),
            "startDate": first_non_empty(debtor.get("startDate"), rdata.get("startDate")),
        }]
    return []


def _debtor(insolvency):
    debtor = insolvency.get("debtor")
    return debtor if isinstance(debtor, dict) else insolvency


def _search_details(search_time: str, search_id: str, debtor) -> str:
    items = [data_item("Search Date", search_time), data_item("Search ID", search_id)]
    if debtor is not None:
        given = (debtor.get("givenNames") or "").split(" ")[0]
        dob = debtor.get("dateOfBirth")
        dob_text = f"{format_date(dob, LONG_DATE)} (Exact match)" if dob else NA
        items += [
            data_item("Family Name", f"{esc(debtor.get('surname'))} (Exact match)"),
            data_item("Given Name", f"{esc(given)} (Exact match)"),
            data_item("Middle Name", esc(debtor.get("middleName"), "Any (including none)")),
            data_item("Date of Birth", dob_text),
        ]
    items.append(data_item("Insolvency Records Searched", "All records", wide=True))
    return "".join(items)


def _record_rows(insolvencies) -> str:
    rows = []
    for index, insolvency in enumerate(insolvencies, start=1):
        debtor = _debtor(insolvency)
        rows.append(table_row(
            index,
            esc(join_non_empty([debtor.get("surname"), debtor.get("givenNames")])),
            format_date(debtor.get("dateOfBirth"), LONG_DATE),
            esc(debtor.get("occupation")),
            esc(debtor.get("addressSuburb")),
            esc_first(insolvency.get("type"), debtor.get("type"), insolvency.get("administrationType")),
            format_date(first_non_empty(debtor.get("startDate"), insolvency.get("startDate")), LONG_DATE),
        ))
    return "".join(rows) or empty_row("No insolvency records found", 7)


def extract_bankruptcy_data(data, business=None, report_type=None, now=None) -> ReportFields:
    now = resolve_now(now)
    rdata = first_non_empty(data.get("rdata"), data.get("data"), default=data)
    if not isinstance(rdata, dict):
        rdata = data

    search_id = esc_first(
        rdata.get("uuid"), rdata.get("extractId"), rdata.get("insolvencySearchId"), data.get("uuid")
    )
    insolvencies = _insolvencies(rdata)

    if to_number(rdata.get("resultCount")) is not None:
        result_count = int(to_number(rdata["resultCount"]))
    else:
        result_count = 1 if insolvencies else 0

    debtor = _debtor(insolvencies[0]) if insolvencies else None

    search_word = resolve_search_word(business, "director-bankruptcy")
    if search_word:
        full_name = esc(search_word.upper())
    elif debtor:
        full_name = esc(join_non_empty([debtor.get("surname"), debtor.get("givenNames")]).upper())
    else:
        full_name = NA

    search_time = f"{now.strftime(LONG_DATE)}, {format_clock(now)} AEDT"

    if result_count == 0:
        status_text = CLEAR_STATUS
        badge = "ok"
        verification = CLEAR_VERIFICATION
        items = list_items(CLEAR_ITEMS)
    else:
        noun = plural(result_count, "record")
        status_text = f"{result_count} Insolvency {noun.capitalize()} Found"
        badge = "critical"
        verification = f"⚠️ {result_count} active or historical insolvency {noun} found"
        items = list_items((
            f"{result_count} insolvency {noun} found on the National Personal Insolvency Index",
            "Review details in the insolvency records section",
            "Verify current status of each insolvency proceeding",
            "Consider impact on current financial standing",
        ))

    fields = ReportFields(
        cover_search_id=search_id,
        cover_full_name=full_name,
        cover_search_date=search_time,
        cover_date_of_birth=format_date(debtor.get("dateOfBirth") if debtor else None, LONG_DATE),

        result_status_text=status_text,
        result_status_badge=badge,
        verification_text=verification,
        search_time=search_time,
        what_this_means_items=items,
        search_details_rows=_search_details(search_time, search_id, debtor),
        insolvency_records_rows=_record_rows(insolvencies),

        document_search_id=search_id,
        document_search_date=search_time,

        page_number_2=page_of(2, TOTAL_PAGES),
        page_number_3=page_of(3, TOTAL_PAGES),
        page_number_4=page_of(4, TOTAL_PAGES),
        total_pages=TOTAL_PAGES,

        company_type="director-bankruptcy",
        acn=NA,
        abn=NA,
        companyName=full_name,
        resultCount=result_count,
    )
    fields.section("insolvency_records", result_count > 0)
    return fields
