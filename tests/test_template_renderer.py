import logging
from pathlib import Path

import pytest

from src.services.report_service import TEMPLATE_MAP
from src.services.template_renderer import (
    apply_sections,
    build_fields,
    find_placeholders,
    replace_variables,
    substitute,
)

REPO_MEDIA_DIR = Path(__file__).resolve().parent.parent / "media"


@pytest.mark.parametrize("report_type,template_name", sorted(TEMPLATE_MAP.items()))
def test_every_placeholder_has_a_field(report_type, template_name, now):
    template = (REPO_MEDIA_DIR / template_name).read_text(encoding="utf-8")
    fields = build_fields({}, report_type, now=now)

    missing = [name for name in find_placeholders(template) if name not in fields]
    assert missing == []


@pytest.mark.parametrize("report_type,template_name", sorted(TEMPLATE_MAP.items()))
def test_rendered_templates_have_no_placeholders_left(report_type, template_name, now):
    template = (REPO_MEDIA_DIR / template_name).read_text(encoding="utf-8")
    html = replace_variables(template, {}, report_type, now=now)

    assert find_placeholders(html) == []
    assert "<!-- section:" not in html


def test_find_placeholders_both_syntaxes():
    template = "${a} {{ b }} ${a} {{c}} ${ not valid-name }"
    assert find_placeholders(template) == ["a", "b", "c"]
    assert find_placeholders(template, delimiters=(("{{", "}}"),)) == ["b", "c"]


def test_substitute_renders_none_and_missing_as_empty():
    html = substitute("<p>${name}|{{count}}|${gone}|${nothing}</p>", {"name": "Acme", "count": 0, "nothing": None})
    assert html == "<p>Acme|0||</p>"


def test_substitute_is_single_pass():
    html = substitute("${a}", {"a": "${b}", "b": "leak"})
    assert html == "${b}"


def test_apply_sections_drops_disabled_blocks():
    template = (
        "<!-- section:outer -->O<!-- section:inner -->I<!-- /section:inner --><!-- /section:outer -->"
        "<!-- section:other -->X<!-- /section:other -->"
    )
    assert apply_sections(template, {"inner": False}) == "OX"
    assert apply_sections(template, {"outer": False}) == "X"
    assert apply_sections(template, None) == "OIX"


def test_common_fields(now):
    fields = build_fields({}, "asic-current", now=now)

    assert fields["company_type"] == "asic-current"
    assert fields["reportDate"] == "5 March 2024"
    assert fields["current_date_and_time"] == "05 March 2024"
    assert fields["acn"] == "N/A"


def test_unknown_report_type_falls_back(now, caplog):
    data = {"entity": {"name": "Acme & Co", "acn": "123456789"}}
    with caplog.at_level(logging.WARNING):
        fields = build_fields(data, "mystery-report", now=now)

    assert fields["company_type"] == "mystery-report"
    assert fields["companyName"] == "Acme &amp; Co"
    assert fields["acn"] == "123 456 789"
    assert fields["caseNumber"] == "N/A"
    assert "mystery-report" in caplog.text


def test_report_type_is_escaped(now):
    fields = build_fields({}, "<b>x</b>", now=now)
    assert fields["company_type"] == "&lt;b&gt;x&lt;/b&gt;"


def test_rendering_is_deterministic(now):
    template = (REPO_MEDIA_DIR / TEMPLATE_MAP["ppsr"]).read_text(encoding="utf-8")
    business = {"Name": "Acme Pty Ltd", "Abn": "12123456789"}

    first = replace_variables(template, {"resource": {"items": []}}, "ppsr", business=business, now=now)
    second = replace_variables(template, {"resource": {"items": []}}, "ppsr", business=business, now=now)
    assert first == second


def test_payload_placeholder_text_is_not_substituted(now):
    data = {"results": [{"name": "${companyName}", "amount": 5}]}
    html = replace_variables("{{unclaimed_money_rows}}", data, "unclaimed-money", now=now)
    assert "${companyName}" in html


def test_unresolved_placeholders_are_blanked(now, caplog):
    with caplog.at_level(logging.WARNING):
        html = replace_variables("<p>${not_a_field}</p>", {}, "ato", now=now)

    assert html == "<p></p>"
    assert "not_a_field" in caplog.text


def test_ppsr_unreadable_result_count_renders(now):
    data = {"resource": {"searchCriteriaSummaries": [{"resultCount": "n/a"}], "items": []}}
    html = replace_variables("${search_status}", data, "ppsr", now=now)
    assert html == "All registrations current and valid"


def test_land_title_address_uses_address_as_reference(now):
    data = {"titleOrder": {"RealPropertySegment": [{
        "IdentityBlock": {"TitleReference": "11/DP1234", "AddressString": "1 Main St, Sydney NSW 2000"},
    }]}}

    by_address = build_fields(data, "land-title-address", now=now)
    by_reference = build_fields(data, "land-title-reference", now=now)

    assert by_address["property_title_reference"] == "1 Main St, Sydney NSW 2000"
    assert by_reference["property_title_reference"] == "11/DP1234"


def test_sections_follow_extractor(now):
    template = "<!-- section:valuation -->VAL<!-- /section:valuation -->${total_pages}"
    assert replace_variables(template, {}, "property", now=now) == "4"
    assert replace_variables(template, {"cotality": {}}, "property", now=now) == "VAL5"
