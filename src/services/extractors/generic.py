from .common import COURT_PLACEHOLDERS, TAX_DEBT_PLACEHOLDERS, ReportFields, entity_fields, esc


def extract_generic_data(data, business=None, report_type=None, now=None) -> ReportFields:
    """Fallback for unregistered report types: entity fields plus fixed defaults."""
    fields = ReportFields(company_type=esc(report_type))
    fields.update(entity_fields(data if isinstance(data, dict) else {}))
    fields.update(COURT_PLACEHOLDERS)
    fields.update(TAX_DEBT_PLACEHOLDERS)
    return fields
