"""
Recover the human-entered search term from the business/order context.

Zero-result searches still have to show who (or what) was searched for,
so extractors ask this module before falling back to payload fields.
"""

from typing import Any, Dict, Optional

from src.utils.payload import dig, pick, join_non_empty

ORGANISATION = "organisation"
INDIVIDUAL = "individual"

COURT_REPORT_TYPES = ("director-court", "director-court-civil", "director-court-criminal")


def classify_subject(business: Optional[Dict[str, Any]], report_type: Optional[str]) -> Optional[str]:
    """
    Organisation or individual.

    Land-title tags force the classification; every other tag follows the
    ``isCompany`` flag of the context.
    """
    if not business:
        return None

    is_org_tag = report_type == "land-title-organisation"
    is_individual_tag = report_type == "land-title-individual"
    flag = business.get("isCompany") if isinstance(business, dict) else None

    if is_org_tag or (flag == "ORGANISATION" and not is_individual_tag):
        return ORGANISATION
    if is_individual_tag or (flag == "INDIVIDUAL" and not is_org_tag):
        return INDIVIDUAL
    return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None


def _selection_name(business: Dict[str, Any], report_type: Optional[str]) -> Optional[str]:
    if report_type == "director-bankruptcy":
        debtor = dig(business, "bankruptcySelection", "debtor")
        if isinstance(debtor, dict):
            name = join_non_empty([debtor.get("givenNames"), debtor.get("surname")])
            return name or None
        return None

    if report_type == "director-related":
        return _text(dig(business, "directorRelatedSelection", "name"))

    if report_type in COURT_REPORT_TYPES:
        return _text(dig(business, "civilSelection", "fullname")) or _text(
            dig(business, "criminalSelection", "fullname")
        )

    return None


def resolve_search_word(business: Optional[Dict[str, Any]], report_type: Optional[str]) -> Optional[str]:
    """
    Display name of the searched subject, or None.

    None means "use whatever the payload has", never an error.
    """
    subject = classify_subject(business, report_type)

    if subject == ORGANISATION:
        return _text(pick(business, "Name", "name", "companyName", "CompanyName"))

    if subject == INDIVIDUAL:
        name = _selection_name(business, report_type)
        if name:
            return name

        name = join_non_empty([
            pick(business, "fname", "firstName"),
            pick(business, "mname", "middleName"),
            pick(business, "lname", "lastName"),
        ])
        return name or None

    return None
