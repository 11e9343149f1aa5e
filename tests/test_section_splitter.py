import pytest

from req_analyzer.section_splitter import split_sections


WELL_FORMED_REPLY = """Here is the analysis.

### 1. REQUIREMENTS
**Functional**
- Users must log in with email

### 2. TEST CASES
1. Login with valid credentials
   - Expected: dashboard shown

### 3. SUMMARY
**Backend**: POST /login
**Frontend**: login form
"""


class TestSplitSections:

    def test_minimal_three_anchor_input(self):
        sections = split_sections("### 1. REQUIREMENTS\nA\n### 2. TEST CASES\nB\n### 3. SUMMARY\nC")
        assert "A" in sections.requirements
        assert "B" in sections.test_cases
        assert "C" in sections.summary

    def test_sections_are_disjoint_and_headed(self):
        sections = split_sections(WELL_FORMED_REPLY)

        assert sections.requirements == "### Requirements\n**Functional**\n- Users must log in with email"
        assert sections.test_cases == "### Test Cases\n1. Login with valid credentials\n   - Expected: dashboard shown"
        assert sections.summary == "### Summary\n**Backend**: POST /login\n**Frontend**: login form"
        assert "Here is the analysis" not in sections.requirements

    def test_no_anchors_falls_back_to_requirements(self):
        reply = "  The model ignored the format.\n\nSome text.  "
        sections = split_sections(reply)

        assert sections.requirements == "The model ignored the format.\n\nSome text."
        assert sections.test_cases == ""
        assert sections.summary == ""

    @pytest.mark.parametrize("reply", ["", "   ", "plain", "### 4. OTHER\nx"])
    def test_total_on_arbitrary_input(self, reply):
        sections = split_sections(reply)
        assert sections.requirements == reply.strip()
        assert sections.test_cases == ""
        assert sections.summary == ""

    def test_anchors_with_empty_bodies_fall_back(self):
        reply = "### 1. REQUIREMENTS\n### 2. TEST CASES\n### 3. SUMMARY\n"
        sections = split_sections(reply)
        assert sections.requirements == reply.strip()

    def test_missing_test_cases_anchor_extends_requirements(self):
        reply = "### 1. REQUIREMENTS\nA\nmore A\n### 3. SUMMARY\nC"
        sections = split_sections(reply)

        assert sections.requirements == "### Requirements\nA\nmore A"
        assert sections.test_cases == ""
        assert sections.summary == "### Summary\nC"

    def test_missing_summary_anchor_runs_test_cases_to_end(self):
        reply = "### 1. REQUIREMENTS\nA\n### 2. TEST CASES\nB\ntrailing notes"
        sections = split_sections(reply)

        assert sections.test_cases == "### Test Cases\nB\ntrailing notes"
        assert sections.summary == ""

    def test_only_summary_anchor(self):
        sections = split_sections("intro\n### 3. SUMMARY\nC")
        assert sections.requirements == ""
        assert sections.summary == "### Summary\nC"

    def test_reordered_anchors_bounded_by_next_found_anchor(self):
        reply = "### 2. TEST CASES\nB\n### 1. REQUIREMENTS\nA\n### 3. SUMMARY\nC"
        sections = split_sections(reply)

        assert sections.test_cases == "### Test Cases\nB"
        assert sections.requirements == "### Requirements\nA"
        assert sections.summary == "### Summary\nC"

    def test_duplicate_anchor_uses_first_occurrence(self):
        reply = "### 1. REQUIREMENTS\nA\n### 2. TEST CASES\nB\n### 2. TEST CASES\nB2\n### 3. SUMMARY\nC"
        sections = split_sections(reply)

        assert sections.test_cases == "### Test Cases\nB\n### 2. TEST CASES\nB2"

    def test_anchor_on_last_line_without_newline(self):
        sections = split_sections("### 1. REQUIREMENTS\nA\n### 3. SUMMARY")
        assert sections.requirements == "### Requirements\nA"
        assert sections.summary == ""

    def test_serialized_field_names(self):
        sections = split_sections("### 1. REQUIREMENTS\nA\n### 2. TEST CASES\nB\n### 3. SUMMARY\nC")
        assert set(sections.to_dict()) == {"requirements", "testCases", "summary"}
