"""Director related-entities report: directorships and shareholdings of one person."""

from src.utils.formatters import NA, LONG_DATE, SLASH_DATE, format_acn, format_date, format_number, format_time
from src.utils.payload import first_non_empty, records

from ..search_term import resolve_search_word
from .common import ReportFields, address_line, empty_row, esc, esc_first, page_of, resolve_now, table_row

TOTAL_PAGES = 4

CEASED_STATUSES = ("Ceased", "Former")


def _status_cell(status: str, ceased: bool) -> str:
    return f'<span class="status-ceased">{status}</span>' if ceased else status


def _directorship(record):
    return {
        "company_name": esc_first(record.get("company_name"), record.get("name")),
        "acn": esc(format_acn(record.get("acn"))) if record.get("acn") else NA,
        "status": esc(record.get("status"), "Current"),
        "appointed": format_date(first_non_empty(record.get("appointment_date"), record.get("start_date")), SLASH_DATE),
    }


def _shareholding(record):
    return {
        "company_name": esc_first(record.get("company_name"), record.get("name")),
        "acn": esc(format_acn(record.get("acn"))) if record.get("acn") else NA,
        "share_class": esc_first(record.get("class"), record.get("share_class")),
        "shares": format_number(first_non_empty(record.get("number_held"), record.get("shares")), default="0"),
        "address": address_line(record.get("address")),
        "status": esc(record.get("status"), "Current"),
    }


def _directorship_rows(items, ceased: bool, message: str) -> str:
    rows = [
        table_row(d["company_name"], d["acn"], _status_cell(d["status"], ceased), d["appointed"])
        for d in items
    ]
    return "".join(rows) or empty_row(message, 4)


def _shareholding_rows(items, ceased: bool, message: str) -> str:
    rows = [
        table_row(
            s["company_name"], s["acn"], s["share_class"], s["shares"], s["address"],
            _status_cell(s["status"], ceased),
        )
        for s in items
    ]
    return "".join(rows) or empty_row(message, 6)


def extract_director_related_data(data, business=None, report_type=None, now=None) -> ReportFields:
    now = resolve_now(now)
    rdata = data.get("rdata") if isinstance(data.get("rdata"), dict) else data
    entity = rdata.get("entity") if isinstance(rdata.get("entity"), dict) else {}

    search_word = resolve_search_word(business, "director-related")
    director_name = esc_first(search_word, entity.get("name"))

    current_directorships, ceased_directorships = [], []
    # Shareholdings are split by whether ASIC matched on name and DOB or name only
    current_with_dob, ceased_with_dob = [], []
    current_name_only, ceased_name_only = [], []

    for extract in records(rdata.get("asic_extracts")):
        for record in records(extract.get("directorships")):
            target = ceased_directorships if record.get("status") in CEASED_STATUSES else current_directorships
            target.append(_directorship(record))

        for record in records(extract.get("shareholdings")):
            current = (record.get("status") or "Current") == "Current"
            if record.get("date_of_birth"):
                target = current_with_dob if current else ceased_with_dob
            else:
                target = current_name_only if current else ceased_name_only
            target.append(_shareholding(record))

    report_date_time = f"{now.strftime(LONG_DATE)}, {format_time(now)}"

    if current_directorships:
        cover_company = current_directorships[0]["company_name"]
        cover_acn = current_directorships[0]["acn"]
    else:
        cover_company = esc(entity.get("reference"))
        cover_acn = NA

    return ReportFields(
        cover_director_name=director_name,
        cover_report_date=now.strftime(LONG_DATE),
        cover_company_name=cover_company,
        cover_company_acn=cover_acn,

        director_name=director_name,
        director_date_of_birth=format_date(entity.get("date_of_birth"), SLASH_DATE),
        director_address=address_line(entity.get("address")),
        director_report_date=report_date_time,
        directorships_count=len(current_directorships),
        shareholdings_count=len(current_with_dob) + len(current_name_only),
        data_extract_date=report_date_time,
        current_directorships_rows=_directorship_rows(
            current_directorships, False, "No current directorships found"
        ),
        ceased_directorships_rows=_directorship_rows(
            ceased_directorships, True, "No ceased directorships found"
        ),
        current_shareholdings_name_dob_rows=_shareholding_rows(
            current_with_dob, False, "No current shareholdings found"
        ),
        ceased_shareholdings_name_dob_rows=_shareholding_rows(
            ceased_with_dob, True, "No ceased shareholdings found"
        ),
        current_shareholdings_name_only_rows=_shareholding_rows(
            current_name_only, False, "No current shareholdings found"
        ),
        ceased_shareholdings_name_only_rows=_shareholding_rows(
            ceased_name_only, True, "No ceased shareholdings found"
        ),

        page_number_2=page_of(2, TOTAL_PAGES),
        page_number_3=page_of(3, TOTAL_PAGES),
        page_number_4=page_of(4, TOTAL_PAGES),
        total_pages=TOTAL_PAGES,
        document_id=esc_first(rdata.get("uuid"), director_name),

        company_type="director-related",
        acn=NA,
        abn=NA,
        companyName=director_name,
    )
