from src.utils.formatters import NA, LONG_DATE, SHORT_DATE, format_date, to_number
from src.utils.payload import first_non_empty, join_non_empty, records

from ..search_term import COURT_REPORT_TYPES, resolve_search_word
from .common import ReportFields, empty_row, esc, esc_first, resolve_now, table_row

COLUMNS = 8


def _section(data, key):
    """(ordered, records, total) for one court search section."""
    section = data.get(key)
    if section is None:
        return False, [], 0
    payload = section.get("data") if isinstance(section, dict) and isinstance(section.get("data"), dict) else {}
    items = records(payload.get("records")) if isinstance(payload.get("records"), list) else []
    total = to_number(payload.get("total")) or len(items)
    return True, items, int(total)


def _criminal_row(index, record) -> str:
    return table_row(
        index,
        esc(record.get("state")),
        format_date(record.get("date"), SHORT_DATE),
        esc(record.get("listing_type")),
        esc(record.get("court")),
        esc_first(record.get("court_room"), record.get("location")),
        esc(record.get("case_no")),
        esc(record.get("case_title")),
    )


def _civil_row(index, record) -> str:
    return table_row(
        index,
        esc(record.get("state")),
        format_date(record.get("date"), SHORT_DATE),
        esc(record.get("listing_type")),
        esc(record.get("court")),
        esc(record.get("case_title")),
        esc(record.get("case_no")),
        esc_first(record.get("additional_info1"), record.get("additional_info")),
    )


def _rows(ordered, items, label, row_builder) -> str:
    if not ordered:
        return empty_row(f"{label} court search not ordered", COLUMNS)
    rows = "".join(row_builder(index, record) for index, record in enumerate(items, start=1))
    return rows or empty_row(f"No {label.lower()} court records found", COLUMNS)


def split_name(name: str):
    """
    Given names and surname from a display name.

        "SMITH, John Paul" → ("John Paul", "SMITH")
        "John Paul Smith"  → ("John Paul", "Smith")
    """
    parts = [part.strip() for part in name.split(",")]
    if len(parts) == 2:
        return parts[1] or NA, parts[0] or NA
    words = name.split()
    if len(words) > 1:
        return " ".join(words[:-1]), words[-1]
    return name, NA


def extract_director_court_data(data, business=None, report_type=None, now=None) -> ReportFields:
    now = resolve_now(now)
    criminal_ordered, criminal, criminal_total = _section(data, "criminal_court")
    civil_ordered, civil, civil_total = _section(data, "civil_court")
    first = (criminal or civil or [{}])[0]

    lookup_type = report_type if report_type in COURT_REPORT_TYPES else None
    if lookup_type is None:
        lookup_type = (business or {}).get("type") or "director-court"
    search_word = resolve_search_word(business, lookup_type)

    if search_word:
        director_name = search_word
        given_name, surname = split_name(search_word)
    else:
        director_name = first_non_empty(
            first.get("fullname"), join_non_empty([first.get("given_name"), first.get("surname")]), default=NA
        )
        given_name = first.get("given_name") or NA
        surname = first.get("surname") or NA

    return ReportFields(
        director_name=esc(director_name),
        report_date=now.strftime(LONG_DATE),
        director_given_name=esc(given_name),
        director_surname=esc(surname),
        total_records=criminal_total + civil_total,
        total_criminal_records=criminal_total,
        total_civil_records=civil_total,
        criminal_court_rows=_rows(criminal_ordered, criminal, "Criminal", _criminal_row),
        civil_court_rows=_rows(civil_ordered, civil, "Civil", _civil_row),
        companyName=esc(director_name),
        acn=NA,
        abn=NA,
        company_type="director-court",
    )
