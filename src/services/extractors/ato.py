from src.utils.formatters import NA, format_currency, parse_date, utc
from src.utils.payload import dig

from .common import COURT_PLACEHOLDERS, ReportFields, entity_fields


def _ato_timestamp(value) -> str:
    """``MMMM D, YYYY, at h:mm:ss A`` in UTC."""
    dt = parse_date(value)
    if dt is None:
        return NA
    dt = utc(dt)
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{dt.strftime('%B')} {dt.day}, {dt.year}, at {hour}:{dt.minute:02d}:{dt.second:02d} {suffix}"


def extract_ato_data(data, business=None, report_type=None, now=None) -> ReportFields:
    debt = dig(data, "current_tax_debt", default={})
    amount = debt.get("amount") if isinstance(debt, dict) else None
    updated_at = debt.get("ato_updated_at") if isinstance(debt, dict) else None

    fields = ReportFields(company_type="ato")
    fields.update(entity_fields(data))
    fields["current_tax_debt_amount"] = format_currency(amount) if amount else NA
    fields["current_tax_debt_ato_updated_at"] = _ato_timestamp(updated_at) if updated_at else NA
    # Tax-debt reports carry no court data
    fields.update(COURT_PLACEHOLDERS)
    return fields
