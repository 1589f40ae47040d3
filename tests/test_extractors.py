import pytest

from src.services.extractors import (
    EXTRACTORS,
    extract_asic_company_data,
    extract_asic_current_data,
    extract_asic_historical_data,
    extract_ato_data,
    extract_bankruptcy_data,
    extract_court_data,
    extract_director_court_data,
    extract_director_related_data,
    extract_land_title_data,
    extract_ppsr_data,
    extract_property_data,
    extract_sole_trader_data,
    extract_trademark_data,
    extract_unclaimed_money_data,
    extract_vehicle_data,
)
from src.services.extractors.bankruptcy import CLEAR_STATUS
from src.services.extractors.director_court import split_name
from src.utils.formatters import NA


# ── Bankruptcy ──────────────────────────────────────────────────────────────


def test_bankruptcy_zero_result_uses_search_term(now):
    business = {
        "isCompany": "INDIVIDUAL",
        "bankruptcySelection": {"debtor": {"givenNames": "John", "surname": "Smith"}},
    }
    fields = extract_bankruptcy_data({"rdata": {"resultCount": 0, "uuid": "abc-1"}}, business=business, now=now)

    assert fields["cover_full_name"] == "JOHN SMITH"
    assert fields["result_status_text"] == CLEAR_STATUS
    assert fields["result_status_badge"] == "ok"
    assert fields["cover_search_id"] == "abc-1"
    assert "No insolvency records found" in fields["insolvency_records_rows"]
    assert fields.sections["insolvency_records"] is False


def test_bankruptcy_record_found(now):
    data = {
        "insolvencies": [{
            "debtor": {"surname": "Smith", "givenNames": "John Paul", "dateOfBirth": "1980-01-02"},
            "type": "Bankruptcy",
        }],
    }
    fields = extract_bankruptcy_data(data, now=now)

    assert fields["cover_full_name"] == "SMITH JOHN PAUL"
    assert fields["result_status_text"] == "1 Insolvency Record Found"
    assert fields["result_status_badge"] == "critical"
    assert fields["cover_date_of_birth"] == "02 January 1980"
    assert "Bankruptcy" in fields["insolvency_records_rows"]
    assert fields.sections["insolvency_records"] is True


def test_bankruptcy_result_count_as_text(now):
    fields = extract_bankruptcy_data({"rdata": {"resultCount": "2"}}, now=now)
    assert fields["result_status_text"] == "2 Insolvency Records Found"


def test_bankruptcy_numeric_organisation_name(now):
    business = {"isCompany": "ORGANISATION", "Name": 123}
    fields = extract_bankruptcy_data({"rdata": {"resultCount": 0}}, business=business, now=now)
    assert fields["cover_full_name"] == "123"


# ── ASIC ────────────────────────────────────────────────────────────────────


def _asic_payload(directors, **extra):
    extract = {"type": "Current", "directors": directors}
    extract.update(extra)
    return {
        "entity": {"name": "Acme <Holdings> Pty Ltd", "acn": "123456789", "abn": "12123456789"},
        "asic_extracts": [extract],
    }


def test_asic_current_promoted_by_ceased_director(now):
    data = _asic_payload([
        {"name": "Jane Citizen", "status": "Current"},
        {"name": "John Smith", "status": "Ceased"},
    ])
    fields = extract_asic_current_data(data, now=now)

    assert fields["is_current_and_historical"] == "true"
    assert fields["extract_current_directors_count"] == 1
    assert fields["extract_historic_directors_count"] == 1
    assert fields["extract_directors_count"] == 2
    assert fields.sections["combined_summary"] is True
    assert fields.sections["current_summary"] is False


def test_asic_current_only(now):
    fields = extract_asic_current_data(_asic_payload([{"name": "Jane Citizen", "status": "Current"}]), now=now)

    assert fields["is_current_and_historical"] == "false"
    assert fields["acn"] == "123 456 789"
    assert fields["abn"] == "12 123 456 789"
    assert fields["companyName"] == "Acme &lt;Holdings&gt; Pty Ltd"
    assert fields["cover_company_name"] == "ACME &lt;HOLDINGS&gt; PTY LTD"
    assert fields["total_pages"] == 7
    assert fields["page_number_8"] == ""
    assert fields.sections["share_structure"] is False
    assert fields.sections["tax_debt"] is False
    assert fields["documents_current_year"] == 2024


def test_asic_current_tax_debt_and_share_structure(now):
    data = _asic_payload(
        [],
        share_structures=[{"class_code": "ORD", "share_count": 100, "amount_paid": 10000}],
    )
    data["current_tax_debt"] = {"amount": 1234.5, "ato_updated_at": "2024-02-01T03:04:05Z"}
    fields = extract_asic_current_data(data, now=now)

    assert fields["current_tax_debt_amount"] == "$1,234.50"
    assert fields["current_tax_debt_ato_updated_at"].startswith("01/02/2024 at ")
    assert fields["total_pages"] == 8
    assert fields["page_number_8"] == "Page 8 of 8"
    assert fields["share_capital"] == "$100.00"
    assert fields.sections["tax_debt"] is True
    assert fields.sections["share_structure"] is True


def test_asic_current_reads_entity_under_rdata(now):
    data = {"rdata": {"entity": {"name": "Nested Pty Ltd"}, "asic_extracts": []}}
    fields = extract_asic_current_data(data, now=now)
    assert fields["entity_name"] == "Nested Pty Ltd"
    assert fields["acn"] == NA


def test_asic_historical_is_always_combined(now):
    fields = extract_asic_historical_data(_asic_payload([{"name": "Jane Citizen", "status": "Current"}]), now=now)
    assert fields["is_current_and_historical"] == "true"
    assert fields["extract_report_type"] == "Current &amp; Historical"


# ── ATO ─────────────────────────────────────────────────────────────────────


def test_ato_timestamp():
    data = {
        "entity": {"name": "Acme Pty Ltd", "acn": "123456789"},
        "current_tax_debt": {"amount": 500, "ato_updated_at": "2024-02-01T15:04:05Z"},
    }
    fields = extract_ato_data(data)

    assert fields["current_tax_debt_amount"] == "$500.00"
    assert fields["current_tax_debt_ato_updated_at"] == "February 1, 2024, at 3:04:05 PM"
    assert fields["companyName"] == "Acme Pty Ltd"
    assert fields["caseNumber"] == NA


# ── PPSR ────────────────────────────────────────────────────────────────────


def test_ppsr_without_registrations(now):
    data = {"resource": {"items": [], "searchCriteriaSummaries": [{"searchNumber": "S-1", "resultCount": 0}]}}
    business = {"Name": "Acme Pty Ltd", "Abn": "12123456789"}
    fields = extract_ppsr_data(data, business=business, report_type="ppsr", now=now)

    assert fields["registration_pages"].count("No data available") == 1
    assert fields["total_pages"] == 6
    assert fields["page_number_glossary"] == "Page 5 of 6"
    assert fields["page_number_document_info"] == "Page 6 of 6"
    assert fields["search_status"] == "All registrations current and valid"
    assert fields["cover_acn"] == "123 456 789"
    assert fields["cover_entity_name"] == "Acme Pty Ltd"


def _registration(number, collateral, party, end=None):
    return {
        "registrationNumber": number,
        "collateralClassType": collateral,
        "securedPartySummary": party,
        "registrationStartTime": "2020-01-01T00:00:00",
        "registrationEndTime": end,
    }


def test_ppsr_registration_pages(now):
    data = {"resource": {"items": [
        _registration("R1", "All Pap No Except", "Big Bank"),
        _registration("R2", "Motor Vehicle", "Car Finance", end="2026-01-01T00:00:00"),
        _registration("R3", "Motor Vehicle", "Car Finance", end="2020-01-01T00:00:00"),
    ]}}
    fields = extract_ppsr_data(data, business={"Name": "Acme"}, report_type="ppsr", now=now)

    assert fields["total_pages"] == 8
    assert "Registration #1 - General Security" in fields["registration_pages"]
    assert "Car Finance (Vehicle 2 of 2)" in fields["registration_pages"]
    assert "Page 6 of 8" in fields["registration_pages"]
    assert fields["search_status"] == "2 active, 1 expired"
    assert fields["vehicle_finance_count"] == 2
    assert fields["vehicle_finance_financiers_count"] == 1
    assert "1 × BLANKET SECURITY" in fields["security_breakdown"]
    assert "[CRITICAL]" in fields["critical_security_section"]


def test_ppsr_registration_pages_are_capped(now):
    items = [_registration(f"R{i}", "Other", f"Party {i}") for i in range(10)]
    fields = extract_ppsr_data({"resource": {"items": items}}, business={"Name": "Acme"}, now=now)

    assert fields["registration_pages"].count('class="page"') == 7
    assert fields["total_pages"] == 12


def test_director_ppsr_has_no_company_numbers(now):
    business = {"isCompany": "INDIVIDUAL", "fname": "Jane", "lname": "Citizen"}
    fields = extract_ppsr_data({"resource": {"items": []}}, business=business, report_type="director-ppsr", now=now)

    assert fields["grantor_name"] == "Jane Citizen"
    assert fields["acn"] == NA
    assert fields["cover_acn"] == NA


def test_ppsr_fractional_result_count(now):
    data = {"resource": {
        "items": [_registration("R1", "Other", "Big Bank")],
        "searchCriteriaSummaries": [{"searchNumber": "S-2", "resultCount": "2.0"}],
    }}
    fields = extract_ppsr_data(data, business={"Name": "Acme"}, report_type="ppsr", now=now)
    assert fields["search_status"] == "1 active, 1 expired"


def test_ppsr_unreadable_result_count_uses_registrations(now):
    data = {"resource": {
        "items": [_registration("R1", "Other", "Big Bank")],
        "searchCriteriaSummaries": [{"resultCount": "unknown"}],
    }}
    fields = extract_ppsr_data(data, business={"Name": "Acme"}, report_type="ppsr", now=now)
    assert fields["search_status"] == "All registrations current and valid"


@pytest.mark.parametrize("data", [
    {"resource": ["unexpected"]},
    {"resource": "unexpected"},
    {"resource": {"items": [], "searchCriteriaSummaries": ["unexpected"]}},
    {"resource": {"items": "unexpected", "searchCriteriaSummaries": "unexpected"}},
])
def test_ppsr_malformed_resource(data, now):
    fields = extract_ppsr_data(data, business={"Name": "Acme"}, report_type="ppsr", now=now)

    assert fields["total_pages"] == 6
    assert fields["search_number"] == NA
    assert fields["registration_pages"].count("No data available") == 1
    assert fields["search_status"] == "All registrations current and valid"


# ── Director court ──────────────────────────────────────────────────────────


def test_director_court_section_not_ordered(now):
    data = {"civil_court": {"data": {"records": [{"state": "NSW", "case_no": "2023/1"}], "total": "1"}}}
    fields = extract_director_court_data(data, report_type="director-court", now=now)

    assert "Criminal court search not ordered" in fields["criminal_court_rows"]
    assert "2023/1" in fields["civil_court_rows"]
    assert fields["total_civil_records"] == 1
    assert fields["total_criminal_records"] == 0
    assert fields["total_records"] == 1


def test_director_court_empty_section(now):
    data = {"criminal_court": {"data": {"records": []}}}
    fields = extract_director_court_data(data, report_type="director-court-criminal", now=now)
    assert "No criminal court records found" in fields["criminal_court_rows"]


def test_director_court_name_from_selection(now):
    business = {"isCompany": "INDIVIDUAL", "civilSelection": {"fullname": "SMITH, John"}}
    fields = extract_director_court_data({}, business=business, report_type="director-court-civil", now=now)

    assert fields["director_name"] == "SMITH, John"
    assert fields["director_given_name"] == "John"
    assert fields["director_surname"] == "SMITH"


def test_director_court_numeric_selection_name(now):
    business = {"isCompany": "INDIVIDUAL", "civilSelection": {"fullname": 456}}
    fields = extract_director_court_data({}, business=business, report_type="director-court-civil", now=now)

    assert fields["director_name"] == "456"
    assert fields["director_given_name"] == "456"
    assert fields["director_surname"] == NA


def test_split_name():
    assert split_name("John Paul Smith") == ("John Paul", "Smith")
    assert split_name("Madonna") == ("Madonna", NA)


# ── Sole trader ─────────────────────────────────────────────────────────────


def test_sole_trader_single_record(now):
    data = {
        "firstName": "John",
        "lastName": "Smith",
        "abnSearchResults": {"ABRPayloadSearchResults": {"response": {"searchResultsList": {
            "searchResultsRecord": {
                "ABN": {"identifierValue": "12345678901", "identifierStatus": "Active"},
                "mainName": {"organisationName": "J SMITH", "score": "100"},
                "mainBusinessPhysicalAddress": {"stateCode": "NSW", "postcode": "2000"},
            },
        }}}},
    }
    fields = extract_sole_trader_data(data, now=now)

    assert fields["totalRecords"] == 1
    assert fields["fullName"] == "John Smith"
    assert "12 345 678 901" in fields["soleTraderTableRows"]
    assert "J SMITH" in fields["soleTraderTableRows"]


def test_sole_trader_no_results(now):
    fields = extract_sole_trader_data({}, business={"fname": "Jane", "lname": "Citizen"}, now=now)
    assert fields["totalRecords"] == 0
    assert fields["searchName"] == "Jane Citizen"
    assert "No search results found" in fields["soleTraderTableRows"]


# ── Vehicle ─────────────────────────────────────────────────────────────────


def test_vehicle_reported_stolen(now):
    data = {
        "vehicle": {"vin": "JT123", "year": 2019, "make": "Toyota", "model": "Corolla"},
        "stolen": [{"details": "Reported stolen in NSW"}],
    }
    fields = extract_vehicle_data(data, now=now)

    assert fields["stolen_status"] == "STOLEN"
    assert fields["stolen_badge"] == "critical"
    assert fields["stolen_details"] == "Reported stolen in NSW"
    assert fields["vehicle_title"] == "2019 Toyota Corolla"
    assert fields["written_off_badge"] == "ok"
    assert fields.sections == {"stolen": True, "written_off": False}


# ── Trademark ───────────────────────────────────────────────────────────────


def test_trademark_empty(now):
    fields = extract_trademark_data({}, now=now)
    assert "No trademarks found" in fields["trademark_sections"]
    assert fields["trademarks_total"] == 0
    assert fields.sections["trademarks"] is False


def test_trademark_counts(now):
    data = {"trademarks": [
        {"number": "1001", "words": "ACME", "status": "Registered"},
        {"number": "1002", "words": "ACME PLUS", "status": "Filed"},
    ]}
    fields = extract_trademark_data(data, now=now)

    assert fields["trademarks_registered"] == 1
    assert fields["trademarks_other"] == 1
    assert "Trademark 1: ACME" in fields["trademark_sections"]
    assert "Trademark 2: ACME PLUS" in fields["trademark_sections"]


# ── Unclaimed money ─────────────────────────────────────────────────────────


def test_unclaimed_money_totals(now):
    data = {"results": [{"name": "Acme", "amount": "100.50"}, {"name": "Acme Ltd", "amount": 20}]}
    fields = extract_unclaimed_money_data(data, now=now)

    assert fields["unclaimed_records_count"] == 2
    assert fields["unclaimed_total_amount"] == "$120.50"
    assert fields.sections["results"] is True


def test_payload_text_is_escaped(now):
    data = {"results": [{"name": "<script>alert(1)</script>", "amount": 1}]}
    rows = extract_unclaimed_money_data(data, now=now)["unclaimed_money_rows"]

    assert "<script>" not in rows
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in rows


# ── Property ────────────────────────────────────────────────────────────────


def _title_order():
    return {
        "RealPropertySegment": [{
            "IdentityBlock": {"TitleReference": "11/DP1234", "AddressString": "1 Main St, Sydney NSW 2000"},
            "RegistryBlock": {"Ownership": {"Owners": [
                {"Name": "ACME PTY LTD"},
                {"Individual": {"FirstName": "Jane", "LastName": "Citizen"}},
            ]}},
        }],
    }


def test_property_without_valuation(now):
    fields = extract_property_data({"titleOrder": _title_order()}, report_type="property", now=now)

    assert fields["property_owner_name"] == "ACME PTY LTD, Jane Citizen"
    assert fields["property_address"] == "1 Main St, Sydney NSW 2000"
    assert fields["property_title_reference"] == "11/DP1234"
    assert fields["total_pages"] == 4
    assert fields["page_number_4"] == ""
    assert fields.sections["valuation"] is False


def test_property_with_valuation(now):
    data = {
        "titleOrder": _title_order(),
        "cotality": {"propertyData": {
            "avmEstimate": 850000,
            "estimatedRange": {"low": 800000, "high": 900000},
        }},
    }
    fields = extract_property_data(data, report_type="property", now=now)

    assert fields["total_pages"] == 5
    assert fields["property_avm_estimate"] == "$850,000"
    assert fields["property_estimated_range"] == "$800,000 – $900,000"
    assert fields.sections["valuation"] is True


# ── Land title ──────────────────────────────────────────────────────────────


def test_land_title_summary_mode(now):
    business = {
        "isCompany": "ORGANISATION",
        "Name": "Acme Pty Ltd",
        "landTitleSelection": {"summary": True, "titleReferences": ["11/DP1", "12/DP2"]},
    }
    fields = extract_land_title_data({}, business=business, report_type="land-title-organisation", now=now)

    assert fields["total_pages"] == 2
    assert fields["title_references_count"] == 2
    assert fields["title_search_information_sections"] == ""
    assert fields.sections["title_references_only"] is True
    assert fields.sections["full_report"] is False


def test_land_title_full_portfolio(now):
    data = {"titleOrders": [_title_order(), _title_order()]}
    business = {"isCompany": "ORGANISATION", "Name": "Acme Pty Ltd"}
    fields = extract_land_title_data(data, business=business, report_type="land-title-organisation", now=now)

    assert fields["total_pages"] == 6
    assert fields["portfolio_page_number"] == 5
    assert fields["current_properties_count"] == "2 properties currently owned"
    assert fields["property_owner_name"] == "ACME PTY LTD"
    assert "Page 3 of 6" in fields["title_search_information_sections"]
    assert "Page 4 of 6" in fields["title_search_information_sections"]
    assert fields.sections["portfolio"] is True
    assert fields.sections["valuation"] is False


def test_land_title_no_data(now):
    fields = extract_land_title_data({"noDataAvailable": True}, report_type="land-title-organisation", now=now)

    assert fields["total_pages"] == 4
    assert fields["current_properties_count"] == "0 properties currently owned"
    assert fields.sections["no_data"] is True
    assert fields.sections["portfolio"] is False


def test_land_title_individual_with_addon(now):
    business = {"isCompany": "INDIVIDUAL", "fname": "Jane", "lname": "Citizen", "addOn": True}
    data = {"titleOrders": [_title_order()], "cotality": [{"propertyData": {"avmEstimate": 500000}}]}
    fields = extract_land_title_data(data, business=business, report_type="land-title-individual", now=now)

    assert fields["person_name"] == "Jane Citizen"
    assert fields["total_pages"] == 6
    assert fields["valuation_page_number"] == 5
    assert fields["primary_property_value"] == "$500,000"
    assert fields.sections["property_overview"] is True
    assert fields.sections["valuation"] is True


# ── Court ───────────────────────────────────────────────────────────────────


def test_court_case_and_insolvency(now):
    data = {
        "entity": {"name": "Acme Pty Ltd", "acn": "123456789"},
        "insolvencies": [{
            "name": "Acme Pty Ltd",
            "notification_time": "2024-02-01T00:00:00",
            "case_type": "Winding up",
            "asic_notice_id": "N-77",
        }],
        "cases": [{
            "case_number": "NSD123/2024",
            "notification_time": "2021-03-05T00:00:00",
            "court_name": "Federal Court",
            "parties": [{"name": "Big Bank", "role": "Applicant", "acn": "987654321"}],
        }],
    }
    fields = extract_court_data(data, now=now)

    assert fields["caseNumber"] == "NSD123/2024"
    assert "(a month ago)" in fields["actionSummaryRows"]
    assert "(3 years ago)" in fields["actionSummaryRows"]
    assert fields["actionSummaryRows"].index("N-77") < fields["actionSummaryRows"].index("NSD123/2024")
    assert "Acme Pty Ltd" in fields["insolvency_parties_rows"]
    assert "987 654 321" in fields["case_parties_rows"]
    assert fields["entity_name"] == "Acme Pty Ltd"
    assert fields.sections == {"insolvency": True, "case": True}


def test_court_insolvency_only(now):
    data = {"insolvencies": [{
        "case_number": "VID9/2023",
        "date_filed": "2023-12-01",
        "parties": [{"name": "Jane Liquidator", "acn": "123456789"}],
    }]}
    fields = extract_court_data(data, now=now)

    assert fields["caseNumber"] == "VID9/2023"
    assert "Jane Liquidator" in fields["insolvency_parties_rows"]
    assert "123 456 789" in fields["insolvency_parties_rows"]
    assert fields["insolvency_appointee"] == "Jane Liquidator"
    assert "ASIC Insolvencies" in fields["actionSummaryRows"]
    assert fields.sections == {"insolvency": True, "case": False}


def test_court_without_actions(now):
    fields = extract_court_data({}, now=now)

    assert fields["caseNumber"] == NA
    assert "No court or insolvency actions found" in fields["actionSummaryRows"]
    assert fields["insolvency_parties_rows"] == ""
    assert fields.sections == {"insolvency": False, "case": False}


# ── ASIC company ────────────────────────────────────────────────────────────


def test_asic_company_related_entities(now):
    data = {
        "rdata": {
            "entity": {"name": "Acme Pty Ltd", "acn": "123456789", "abn": "12123456789"},
            "asic_extracts": [{
                "shareholdings": [
                    {"name": "Sub One Pty Ltd", "acn": "987654321", "class": "ORD", "number_held": 1000, "status": "Current"},
                    {"name": "Old Sub Pty Ltd", "number_held": 5, "status": "Ceased"},
                    {"name": "Pending Pty Ltd", "status": "Pending"},
                ],
                "licences": [
                    {"type": "AFSL", "number": "L-1"},
                    {"type": "ACL", "number": "L-2", "end_date": "2022-06-30"},
                    {"type": "ACL", "number": "L-3", "status": "Ceased", "end_date": "2020-01-01"},
                ],
            }],
        },
        "asic_documents": [
            {"date": "2020-05-01", "form_code": "FORM-OLD"},
            {"date": "2023-05-01", "form_code": "FORM-NEW"},
        ],
    }
    fields = extract_asic_company_data(data, now=now)

    assert fields["cover_company_name"] == "Acme Pty Ltd"
    assert fields["cover_document_number"] == "ACN 123 456 789"
    assert fields["current_shareholdings_count"] == 1
    assert fields["former_shareholdings_count"] == 1
    assert "987 654 321" in fields["current_shareholdings_rows"]
    assert "1,000" in fields["current_shareholdings_rows"]
    assert "Old Sub Pty Ltd" in fields["former_shareholdings_rows"]
    assert "Pending Pty Ltd" not in fields["current_shareholdings_rows"] + fields["former_shareholdings_rows"]

    # A licence without a status counts as current even once it has an end date
    assert fields["current_licences_count"] == 2
    rows = fields["licences_rows"]
    assert rows.count("Ceased") == 2
    assert rows.count("Current") == 1
    assert "30/06/2022" in rows

    assert fields["asic_documents_count"] == 2
    docs = fields["asic_documents_rows"]
    assert docs.index("FORM-NEW") < docs.index("FORM-OLD")


def test_asic_company_empty(now):
    fields = extract_asic_company_data({}, now=now)

    assert "No current shareholdings found" in fields["current_shareholdings_rows"]
    assert "No former shareholdings found" in fields["former_shareholdings_rows"]
    assert "No licences found" in fields["licences_rows"]
    assert "No ASIC documents found" in fields["asic_documents_rows"]
    assert fields["cover_acn"] == NA


# ── Director related ────────────────────────────────────────────────────────


def test_director_related_entities(now):
    business = {"isCompany": "INDIVIDUAL", "directorRelatedSelection": {"name": "Jane Citizen"}}
    data = {"rdata": {
        "entity": {"name": "CITIZEN, Jane", "date_of_birth": "1980-01-02"},
        "asic_extracts": [{
            "directorships": [
                {"company_name": "Alpha Pty Ltd", "acn": "123456789", "status": "Current", "appointment_date": "2019-01-01"},
                {"company_name": "Beta Pty Ltd", "status": "Former"},
                {"company_name": "Gamma Pty Ltd", "status": "Ceased"},
            ],
            "shareholdings": [
                {"company_name": "Alpha Pty Ltd", "date_of_birth": "1980-01-02", "number_held": 2500},
                {"company_name": "Delta Pty Ltd", "status": "Ceased"},
                {"company_name": "Epsilon Pty Ltd"},
            ],
        }],
    }}
    fields = extract_director_related_data(data, business=business, now=now)

    assert fields["director_name"] == "Jane Citizen"
    assert fields["director_date_of_birth"] == "02/01/1980"
    assert fields["cover_company_name"] == "Alpha Pty Ltd"
    assert fields["cover_company_acn"] == "123 456 789"
    assert fields["directorships_count"] == 1
    assert fields["shareholdings_count"] == 2

    assert "01/01/2019" in fields["current_directorships_rows"]
    ceased = fields["ceased_directorships_rows"]
    assert "Beta Pty Ltd" in ceased and "Gamma Pty Ltd" in ceased
    assert ceased.count("status-ceased") == 2

    assert "2,500" in fields["current_shareholdings_name_dob_rows"]
    assert "Epsilon Pty Ltd" in fields["current_shareholdings_name_only_rows"]
    assert "Delta Pty Ltd" in fields["ceased_shareholdings_name_only_rows"]
    assert "No ceased shareholdings found" in fields["ceased_shareholdings_name_dob_rows"]


def test_director_related_without_current_directorships(now):
    data = {"rdata": {"entity": {"name": "CITIZEN, Jane", "reference": "Order 42"}}}
    fields = extract_director_related_data(data, now=now)

    assert fields["director_name"] == "CITIZEN, Jane"
    assert fields["cover_company_name"] == "Order 42"
    assert fields["cover_company_acn"] == NA
    assert fields["directorships_count"] == 0
    assert "No current directorships found" in fields["current_directorships_rows"]


# ── Every extractor ─────────────────────────────────────────────────────────


def test_extractors_are_deterministic_for_a_fixed_clock(now):
    business = {"isCompany": "ORGANISATION", "Name": "Acme Pty Ltd", "Abn": "12123456789"}
    for report_type, extractor in EXTRACTORS.items():
        first = extractor({}, business=business, report_type=report_type, now=now)
        second = extractor({}, business=business, report_type=report_type, now=now)
        assert first == second, report_type
        assert first.sections == second.sections, report_type
