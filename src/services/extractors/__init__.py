from .common import ReportFields
from .ato import extract_ato_data
from .court import extract_court_data
from .asic_current import extract_asic_current_data
from .asic_historical import extract_asic_historical_data
from .asic_company import extract_asic_company_data
from .bankruptcy import extract_bankruptcy_data
from .director_related import extract_director_related_data
from .ppsr import extract_ppsr_data
from .director_court import extract_director_court_data
from .property import extract_property_data
from .land_title import extract_land_title_data
from .sole_trader import extract_sole_trader_data
from .vehicle import extract_vehicle_data
from .trademark import extract_trademark_data
from .unclaimed_money import extract_unclaimed_money_data
from .generic import extract_generic_data

# Report tag → extractor. Every extractor takes (data, business, report_type, now).
EXTRACTORS = {
    "ato": extract_ato_data,
    "court": extract_court_data,
    "asic-current": extract_asic_current_data,
    "asic-historical": extract_asic_historical_data,
    "asic-company": extract_asic_company_data,
    "director-bankruptcy": extract_bankruptcy_data,
    "director-related": extract_director_related_data,
    "ppsr": extract_ppsr_data,
    "director-ppsr": extract_ppsr_data,
    "director-court": extract_director_court_data,
    "director-court-civil": extract_director_court_data,
    "director-court-criminal": extract_director_court_data,
    "property": extract_property_data,
    "director-property": extract_property_data,
    "land-title-reference": extract_property_data,
    "land-title-address": extract_property_data,
    "land-title-organisation": extract_land_title_data,
    "land-title-individual": extract_land_title_data,
    "sole-trader-check": extract_sole_trader_data,
    "revs": extract_vehicle_data,
    "vehicle": extract_vehicle_data,
    "trademark": extract_trademark_data,
    "unclaimed-money": extract_unclaimed_money_data,
}


def get_extractor(report_type):
    """Extractor for *report_type*; unknown tags get the generic fallback."""
    return EXTRACTORS.get(report_type, extract_generic_data)


__all__ = [
    "ReportFields",
    "EXTRACTORS",
    "get_extractor",
    "extract_ato_data",
    "extract_court_data",
    "extract_asic_current_data",
    "extract_asic_historical_data",
    "extract_asic_company_data",
    "extract_bankruptcy_data",
    "extract_director_related_data",
    "extract_ppsr_data",
    "extract_director_court_data",
    "extract_property_data",
    "extract_land_title_data",
    "extract_sole_trader_data",
    "extract_vehicle_data",
    "extract_trademark_data",
    "extract_unclaimed_money_data",
    "extract_generic_data",
]
