"""Company related-entities report (shareholdings held by the company, licences, documents)."""

from src.utils.formatters import (
    NA, LONG_DATE, SHORT_DATE, SLASH_DATE, format_date, format_identifier_if_numeric,
    format_number, format_time,
)
from src.utils.payload import as_list, first_dict, first_non_empty, records

from .common import (
    COURT_PLACEHOLDERS, ReportFields, address_line, empty_row, esc, esc_first, page_of,
    resolve_now, sort_by_date, table_row,
)

TOTAL_PAGES = 4


def _shareholding_rows(holdings, default_status: str, empty_message: str) -> str:
    rows = [
        table_row(
            esc(h.get("name")),
            esc(format_identifier_if_numeric(h.get("acn"), 9)) if h.get("acn") else NA,
            esc(h.get("class")),
            format_number(h.get("number_held"), default="0") if h.get("number_held") else "0",
            address_line(h.get("address")),
            esc(h.get("status"), default_status),
        )
        for h in holdings
    ]
    return "".join(rows) or empty_row(empty_message, 6)


def _licence_status(licence) -> str:
    return licence.get("status") or ("Ceased" if licence.get("end_date") else "Current")


def _licence_rows(licences) -> str:
    rows = [
        table_row(
            esc_first(lic.get("type"), lic.get("licence_type")),
            esc_first(lic.get("number"), lic.get("licence_number"), lic.get("identifier")),
            esc(_licence_status(lic)),
            address_line(lic.get("address")),
            format_date(first_non_empty(lic.get("start_date"), lic.get("appointment_date")), SLASH_DATE),
            format_date(lic.get("end_date"), SLASH_DATE),
            esc(lic.get("document_number")),
        )
        for lic in licences
    ]
    return "".join(rows) or empty_row("No licences found", 7)


def _document_rows(documents) -> str:
    rows = [
        table_row(
            format_date(doc.get("date"), SLASH_DATE),
            esc(doc.get("form_code")),
            esc(doc.get("description")),
            esc_first(doc.get("identifier"), doc.get("document_number")),
        )
        for doc in sort_by_date(documents, "date")
    ]
    return "".join(rows) or empty_row("No ASIC documents found", 4)


def extract_asic_company_data(data, business=None, report_type=None, now=None) -> ReportFields:
    now = resolve_now(now)
    rdata = data.get("rdata") if isinstance(data.get("rdata"), dict) else data
    entity = first_dict(rdata.get("entity"), data.get("entity"))

    extracts = [
        e for e in as_list(first_non_empty(rdata.get("asic_extracts"), data.get("asic_extracts")))
        if isinstance(e, dict)
    ]
    extract = extracts[0] if extracts else {}
    shareholdings = records(extract.get("shareholdings"))
    current = [h for h in shareholdings if h.get("status") == "Current"]
    former = [h for h in shareholdings if h.get("status") == "Ceased"]

    licences = records(first_non_empty(data.get("licences"), extract.get("licences")))
    current_licences = [
        lic for lic in licences
        if not lic.get("status") or lic.get("status") == "Current" or not lic.get("end_date")
    ]
    documents = records(data.get("asic_documents"))

    abn = format_identifier_if_numeric(first_non_empty(entity.get("abn"), data.get("abn")), 11)
    acn = format_identifier_if_numeric(first_non_empty(entity.get("acn"), data.get("acn")), 9)
    document_number = first_non_empty(
        entity.get("document_number"), data.get("document_number"), None if acn == NA else acn, default=NA
    )
    if acn != NA:
        cover_document_number = f"ACN {esc(acn)}"
    else:
        cover_document_number = esc(document_number, "")

    location = " ".join(
        str(v) for v in (
            first_non_empty(entity.get("abr_state"), data.get("abr_state")),
            first_non_empty(entity.get("abr_postcode"), data.get("abr_postcode")),
        ) if v
    )

    fields = ReportFields(
        cover_company_name=esc(entity.get("name")),
        cover_report_title="Company Related Entities Report",
        cover_report_date=now.strftime(LONG_DATE),
        cover_abn=esc(abn),
        cover_acn=esc(acn),
        cover_document_number=cover_document_number,

        entity_name=esc(entity.get("name")),
        entity_abn=esc(abn),
        entity_acn=esc(acn),
        entity_asic_status=esc_first(entity.get("asic_status"), data.get("asic_status")),
        entity_abn_status=esc_first(entity.get("abr_status"), data.get("abn_status")),
        entity_gst_status=esc_first(entity.get("abr_gst_status"), data.get("abn_gst_status")),
        entity_registration_date=format_date(entity.get("asic_date_of_registration"), SLASH_DATE),
        entity_location=esc(location),
        report_date=f"{now.strftime(SHORT_DATE)}, {format_time(now)}",

        current_shareholdings_count=len(current),
        former_shareholdings_count=len(former),
        current_licences_count=len(current_licences),
        asic_documents_count=len(documents),

        current_shareholdings_rows=_shareholding_rows(current, "Current", "No current shareholdings found"),
        former_shareholdings_rows=_shareholding_rows(former, "Ceased", "No former shareholdings found"),
        licences_rows=_licence_rows(licences),
        asic_documents_rows=_document_rows(documents),

        page_number_2=page_of(2, TOTAL_PAGES),
        page_number_3=page_of(3, TOTAL_PAGES),
        page_number_4=page_of(4, TOTAL_PAGES),
        total_pages=TOTAL_PAGES,

        company_type="asic-company",
        acn=acn,
        abn=abn,
        companyName=esc(entity.get("name")),
        entity_review_date=format_date(entity.get("review_date"), SLASH_DATE),
        entity_registered_in=esc(entity.get("registered_in")),
        entity_abr_gst_status=esc(entity.get("abr_gst_status")),
        entity_document_number=esc(document_number),
        entity_organisation_type=esc(entity.get("organisation_type")),
        entity_asic_date_of_registration=format_date(entity.get("asic_date_of_registration"), SLASH_DATE),
        abn_state=esc_first(entity.get("abr_state"), data.get("abn_state")),
        abn_status=esc_first(entity.get("abr_status"), data.get("abn_status")),
    )
    fields.update(COURT_PLACEHOLDERS)
    return fields
