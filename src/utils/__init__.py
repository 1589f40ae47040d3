from .formatters import (
    NA, SHORT_DATE, LONG_DATE, SLASH_DATE, DASH_DATE, DASH_SHORT_DATE, MONTH_YEAR,
    format_acn, format_abn, format_identifier_if_numeric, digits_only,
    parse_date, format_date, format_time, format_clock, format_datetime,
    format_day_month, time_ago, to_number, format_currency, format_number,
    format_land_area, format_boolean, escape_html, utc,
)
from .payload import (
    is_empty, dig, first_non_empty, first_dict, pick, as_list, values_of, records, record_list, join_non_empty
)

__all__ = [
    "NA", "SHORT_DATE", "LONG_DATE", "SLASH_DATE", "DASH_DATE", "DASH_SHORT_DATE", "MONTH_YEAR",
    "format_acn", "format_abn", "format_identifier_if_numeric", "digits_only",
    "parse_date", "format_date", "format_time", "format_clock", "format_datetime",
    "format_day_month", "time_ago", "to_number", "format_currency", "format_number",
    "format_land_area", "format_boolean", "escape_html", "utc",
    "is_empty", "dig", "first_non_empty", "first_dict", "pick", "as_list", "values_of", "records",
    "record_list", "join_non_empty",
]
