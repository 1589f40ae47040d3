from src.utils.formatters import NA, LONG_DATE, format_date, format_identifier_if_numeric
from src.utils.payload import as_list, dig, first_non_empty, join_non_empty, pick

from .common import ReportFields, empty_row, esc, resolve_now, table_row

NAME_KEYS = ("businessName", "legalName", "mainName", "mainTradingName", "otherTradingName")


def search_records(abn_results):
    """``searchResultsRecord`` entries from an ABR payload, single record or list."""
    response = dig(abn_results, "ABRPayloadSearchResults", "response", default={})
    results_list = response.get("searchResultsList") if isinstance(response, dict) else None
    if isinstance(results_list, dict) and results_list.get("searchResultsRecord") is not None:
        found = results_list["searchResultsRecord"]
    elif isinstance(results_list, list):
        found = results_list
    elif isinstance(response, dict) and response.get("searchResultsRecord") is not None:
        found = response["searchResultsRecord"]
    else:
        found = []
    return [r for r in as_list(found) if isinstance(r, dict)]


def _record_row(record) -> str:
    abn = record.get("ABN") if isinstance(record.get("ABN"), dict) else {}
    abn_value = first_non_empty(abn.get("identifierValue"), dig(abn, "ABN", "identifierValue"))
    abn_status = first_non_empty(abn.get("identifierStatus"), dig(abn, "ABN", "identifierStatus"), default=NA)

    name = next((record[k] for k in NAME_KEYS if isinstance(record.get(k), dict)), {})
    org_name = pick(name, "organisationName", "OrganisationName", "fullName", "FullName", default=NA)
    address = pick(record, "mainBusinessPhysicalAddress", "MainBusinessPhysicalAddress", default={})

    return table_row(
        f"<strong>{esc(format_identifier_if_numeric(abn_value, 11))}</strong>",
        esc(abn_status),
        esc(org_name),
        esc(pick(name, "score", "Score")),
        esc(pick(name, "isCurrentIndicator", "IsCurrentIndicator")),
        esc(pick(address, "stateCode", "StateCode")),
        esc(pick(address, "postcode", "Postcode")),
        esc(pick(address, "isCurrentIndicator", "IsCurrentIndicator")),
    )


def extract_sole_trader_data(data, business=None, report_type=None, now=None) -> ReportFields:
    now = resolve_now(now)
    rdata = data.get("rdata") if isinstance(data.get("rdata"), dict) else data
    business = business or {}

    first_name = first_non_empty(
        rdata.get("firstName"), rdata.get("fname"), business.get("fname"), business.get("firstName"), default=""
    )
    last_name = first_non_empty(
        rdata.get("lastName"), rdata.get("lname"), business.get("lname"), business.get("lastName"), default=""
    )
    full_name = join_non_empty([first_name, last_name])
    search_name = first_non_empty(rdata.get("searchName"), full_name, default=NA)

    found = search_records(rdata.get("abnSearchResults") or {})
    rows = "".join(_record_row(r) for r in found) or empty_row("No search results found", 8)

    return ReportFields(
        firstName=esc(first_name, ""),
        lastName=esc(last_name, ""),
        searchName=esc(search_name),
        fullName=esc(full_name),
        reportDate=format_date(rdata.get("searchDate") or now, LONG_DATE),
        companyName=esc(search_name),
        company_type="Sole Trader Check",
        acn=NA,
        abn=NA,
        soleTraderTableRows=rows,
        totalRecords=len(found),
    )
