import pytest

from req_analyzer.confluence_client import convert_storage_to_text
from req_analyzer.requirement_filter import filter_requirements, identify_modules, is_requirement_line


class TestIsRequirementLine:

    @pytest.mark.parametrize("line", [
        "The system must log in",
        "Must support SSO",
        "MUST support SSO",
        "should be fast",
        "Shall retain audit logs",
        "Will send emails",
        "Needs to export CSV",
        "User can reset password",
        "System should retry",
        "Application must start",
        "Requirement: uptime 99.9%",
        "REQ-12 data retention",
        "1. First step",
        "10. Reports are exported nightly",
        "123. Audit log kept",
        "* starred item",
        "- dashed item",
        "• bullet item",
        "## Authentication",
    ])
    def test_retained(self, line):
        assert is_requirement_line(line) is True

    @pytest.mark.parametrize("line", [
        "",
        "hi",
        "must",
        "Some background paragraph.",
        "10 items in total",
        "The team must agree",
        "Note that the system must log in",
    ])
    def test_discarded(self, line):
        assert is_requirement_line(line) is False


class TestFilterRequirements:

    def test_keyword_line_kept_generic_line_dropped(self):
        text = convert_storage_to_text("<p>The system must log in</p><p>hi</p>")
        result = filter_requirements(text)
        assert result.text == "The system must log in"
        assert result.modules == []

    def test_order_preserved_and_joined_with_blank_lines(self):
        text = "\n".join([
            "# Login",
            "Intro paragraph that is not a requirement",
            "  The user must log in  ",
            "• Should lock after 3 failed attempts",
            "ok",
            "2. Password reset by email",
        ])

        result = filter_requirements(text)

        assert result.text == (
            "# Login\n\n"
            "The user must log in\n\n"
            "• Should lock after 3 failed attempts\n\n"
            "2. Password reset by email"
        )

    def test_long_numbered_lists_kept_past_nine(self):
        text = "9. Users must log in\n10. Reports are exported nightly\n11. Audit log kept"

        result = filter_requirements(text)

        assert result.text == (
            "9. Users must log in\n\n"
            "10. Reports are exported nightly\n\n"
            "11. Audit log kept"
        )

    def test_never_returns_short_lines(self):
        text = "- a\n* b\n#\nmust\nshall do it"
        result = filter_requirements(text)
        for line in result.text.split("\n\n"):
            assert len(line.strip()) >= 5
        assert result.text == "shall do it"

    def test_modules_from_headers(self):
        text = "# Login\nMust accept email\n### Reports \nShould export PDF"
        result = filter_requirements(text)
        assert result.modules == ["Login", "Reports"]

    def test_modules_consistent_with_text(self):
        text = "## Billing\n- Must invoice monthly\n## Billing\n## Payments"
        result = filter_requirements(text)
        assert result.modules == identify_modules(result.text)
        assert result.modules == ["Billing", "Billing", "Payments"]

    def test_nothing_retained(self):
        result = filter_requirements("Background only.\n\nNothing to see here.")
        assert result.text == ""
        assert result.modules == []
