"""Tests for template rendering and validation."""

from datetime import date

import pytest

from invoice_numbering.config import settings
from invoice_numbering.core.exceptions import InvalidTemplateError
from invoice_numbering.services.template_parser import TemplateParser


@pytest.fixture
def parser():
    return TemplateParser()


class TestRender:
    """Test TemplateParser.render."""

    def test_sequence_and_year(self, parser):
        assert parser.render("INV-{YYYY}-{SEQ:5}", 42, date(2026, 3, 15)) == "INV-2026-00042"

    def test_sequence_is_never_truncated(self, parser):
        assert parser.render("{SEQ:2}", 12345, date(2026, 1, 1)) == "12345"

    def test_month_tokens(self, parser):
        issue_date = date(2026, 2, 9)
        assert parser.render("{MM}", 1, issue_date) == "02"
        assert parser.render("{M}", 1, issue_date) == "2"
        assert parser.render("{M}", 1, date(2026, 11, 9)) == "11"

    def test_two_digit_year(self, parser):
        assert parser.render("{YY}", 1, date(2026, 1, 1)) == "26"
        assert parser.render("{YY}", 1, date(2005, 1, 1)) == "05"

    def test_department_code_is_uppercased(self, parser):
        result = parser.render("{DEPT}-{SEQ:4}", 7, date(2026, 1, 1), "sales")
        assert result == "SALES-0007"

    def test_dept_name_is_not_split_by_dept(self, parser):
        result = parser.render("{DEPT_NAME}/{SEQ:3}", 1, date(2026, 1, 1), "ops")
        assert result == "OPS/001"

    def test_missing_department_drops_following_separator(self, parser):
        assert parser.render("{DEPT}-{SEQ:4}", 7, date(2026, 1, 1)) == "0007"

    def test_missing_department_drops_preceding_separator(self, parser):
        result = parser.render("INV-{YYYY}-{DEPT}", 3, date(2026, 1, 1))
        assert result == "INV-2026"

    def test_missing_department_drops_only_one_separator(self, parser):
        result = parser.render("INV-{DEPT}-{SEQ:3}", 3, date(2026, 1, 1))
        assert result == "INV-003"

    def test_blank_department_treated_as_missing(self, parser):
        assert parser.render("{DEPT}/{SEQ:2}", 5, date(2026, 1, 1), "  ") == "05"

    def test_unknown_tokens_pass_through(self, parser):
        result = parser.render("{FOO}-{SEQ:3}-{bar}", 9, date(2026, 1, 1))
        assert result == "{FOO}-009-{bar}"

    def test_known_token_with_argument_passes_through(self, parser):
        assert parser.render("{YYYY:2}-{SEQ:1}", 1, date(2026, 1, 1)) == "{YYYY:2}-1"

    def test_template_without_sequence_is_constant(self, parser):
        first = parser.render("INV-{YYYY}", 1, date(2026, 1, 1))
        second = parser.render("INV-{YYYY}", 2, date(2026, 6, 1))
        assert first == second == "INV-2026"

    def test_literal_text_only(self, parser):
        assert parser.render("FIXED", 1, date(2026, 1, 1)) == "FIXED"

    def test_rendering_is_deterministic(self, parser):
        args = ("{DEPT}-{YY}{MM}-{SEQ:6}", 314, date(2026, 7, 4), "hq")
        assert parser.render(*args) == parser.render(*args) == "HQ-2607-000314"

    @pytest.mark.parametrize(
        "template", ["{SEQ}", "{SEQ:}", "{SEQ:x}", "{SEQ:0}", "{SEQ:-2}", "{SEQ:11}"]
    )
    def test_malformed_sequence_token(self, parser, template):
        with pytest.raises(InvalidTemplateError):
            parser.render(template, 1, date(2026, 1, 1))

    def test_oversized_padding_rejected_without_validation(self, parser):
        assert parser.render("{SEQ:10}", 7, date(2026, 1, 1)) == "0000000007"
        with pytest.raises(InvalidTemplateError, match="between 1 and 10"):
            parser.render("INV-{SEQ:100000000}", 7, date(2026, 1, 1))

    @pytest.mark.parametrize("value", [0, -1, "3", 1.5, True])
    def test_invalid_sequence_value(self, parser, value):
        with pytest.raises(ValueError):
            parser.render("{SEQ:3}", value, date(2026, 1, 1))

    def test_missing_date(self, parser):
        with pytest.raises(ValueError):
            parser.render("{SEQ:3}", 1, None)

    def test_missing_template(self, parser):
        with pytest.raises(InvalidTemplateError):
            parser.render(None, 1, date(2026, 1, 1))


class TestValidate:
    """Test TemplateParser.validate and preview."""

    def test_valid_template_is_stripped(self, parser):
        assert parser.validate("  INV-{SEQ:4}  ") == "INV-{SEQ:4}"

    def test_unknown_tokens_accepted(self, parser):
        assert parser.validate("{CUSTOM}-{SEQ:4}") == "{CUSTOM}-{SEQ:4}"

    def test_template_without_sequence_accepted(self, parser):
        assert parser.validate("INV-{YYYY}") == "INV-{YYYY}"
        assert parser.has_sequence_token("INV-{YYYY}") is False
        assert parser.has_sequence_token("INV-{SEQ:3}") is True

    @pytest.mark.parametrize("template", [None, "", "   "])
    def test_blank_template(self, parser, template):
        with pytest.raises(InvalidTemplateError):
            parser.validate(template)

    def test_too_long(self, parser):
        template = "X" * (settings.template_max_length + 1)
        with pytest.raises(InvalidTemplateError, match="too long"):
            parser.validate(template)

    def test_padding_limit(self, parser):
        assert parser.validate("{SEQ:10}") == "{SEQ:10}"
        with pytest.raises(InvalidTemplateError):
            parser.validate("{SEQ:11}")

    def test_invalid_template_is_a_value_error(self, parser):
        with pytest.raises(ValueError):
            parser.validate("{SEQ:abc}")

    def test_preview(self, parser):
        assert parser.preview("INV-{DEPT}-{YYYY}{MM}-{SEQ:4}") == "INV-202602-0001"
