"""
Report template rendering.

Merges the fields an extractor produces for a report type into an HTML
template. Optional ``<!-- section:name --> ... <!-- /section:name -->``
blocks are resolved first, then ``${key}`` and ``{{key}}`` placeholders
are substituted in a single pass.
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from src.services.extractors import EXTRACTORS, ReportFields, extract_generic_data, get_extractor
from src.services.extractors.common import resolve_now
from src.utils.formatters import NA, LONG_DATE, escape_html, format_day_month, format_identifier_if_numeric

logger = logging.getLogger(__name__)

DELIMITERS: Tuple[Tuple[str, str], ...] = (("${", "}"), ("{{", "}}"))

SECTION_RE = re.compile(
    r"<!--\s*section:([A-Za-z0-9_\-]+)\s*-->(.*?)<!--\s*/section:\1\s*-->",
    re.DOTALL,
)
_NAME = r"\s*([A-Za-z_][A-Za-z0-9_]*)\s*"


def _placeholder_re(delimiters: Sequence[Tuple[str, str]]):
    alternatives = [re.escape(opening) + _NAME + re.escape(closing) for opening, closing in delimiters]
    return re.compile("|".join(alternatives))


PLACEHOLDER_RE = _placeholder_re(DELIMITERS)


def _matched_name(match) -> str:
    return next(group for group in match.groups() if group is not None)


def find_placeholders(template: str, delimiters: Sequence[Tuple[str, str]] = DELIMITERS) -> List[str]:
    """Placeholder names used by *template*, in first-seen order."""
    pattern = PLACEHOLDER_RE if tuple(delimiters) == DELIMITERS else _placeholder_re(delimiters)
    seen: Dict[str, None] = {}
    for match in pattern.finditer(template):
        seen.setdefault(_matched_name(match), None)
    return list(seen)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def substitute(template: str, fields: Dict[str, Any], delimiters: Sequence[Tuple[str, str]] = DELIMITERS) -> str:
    """
    Replace every placeholder with its field value.

    None renders as an empty string, and so does a placeholder with no
    field. Values are inserted as-is; extractors escape payload text.
    """
    pattern = PLACEHOLDER_RE if tuple(delimiters) == DELIMITERS else _placeholder_re(delimiters)
    return pattern.sub(lambda match: _as_text(fields.get(_matched_name(match))), template)


def apply_sections(template: str, sections: Optional[Dict[str, bool]]) -> str:
    """
    Keep or drop optional blocks.

    A block is kept unless *sections* disables it by name. Blocks may
    nest as long as the nested block has a different name.
    """
    sections = sections or {}

    def resolve(match) -> str:
        return match.group(2) if sections.get(match.group(1), True) else ""

    previous = None
    while previous != template:
        previous = template
        template = SECTION_RE.sub(resolve, template)
    return template


def build_fields(data, report_type: str, business=None, now: Optional[datetime] = None) -> ReportFields:
    """Extractor output merged over the keys every template may use."""
    now = resolve_now(now)
    data = data if isinstance(data, dict) else {}

    if report_type not in EXTRACTORS:
        logger.warning(f"No extractor registered for report type '{report_type}', using generic fields")
    extractor = get_extractor(report_type)
    extracted = extractor(data, business=business, report_type=report_type, now=now)

    fields = ReportFields(sections=getattr(extracted, "sections", None))
    fields.update(extract_generic_data(data, business=business, report_type=report_type, now=now))
    fields["company_type"] = escape_html(report_type)
    fields["reportDate"] = format_day_month(now)
    fields["current_date_and_time"] = now.strftime(LONG_DATE)
    fields.update(extracted)

    fields["acn"] = escape_html(format_identifier_if_numeric(fields.get("acn")))
    fields["abn"] = escape_html(format_identifier_if_numeric(fields.get("abn")))

    if report_type == "land-title-address":
        address = fields.get("property_address")
        if address and address != NA:
            fields["property_title_reference"] = address

    return fields


def replace_variables(template: str, data, report_type: str, business=None, now: Optional[datetime] = None) -> str:
    """Render *template* for one report."""
    fields = build_fields(data, report_type, business=business, now=now)
    html = apply_sections(template, fields.sections)

    unresolved = [name for name in find_placeholders(html) if name not in fields]
    if unresolved:
        logger.warning(f"Unresolved placeholders for '{report_type}' blanked: {', '.join(unresolved)}")

    return substitute(html, fields)
