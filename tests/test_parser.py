"""
New-feature text format.
"""

import pytest

import config
from features.errors import ValidationError
from features.queue import parse_feature_text


class TestParseFeatureText:
    def test_full_block(self):
        draft = parse_feature_text(
            "NAME: Foo\nCATEGORY: crm\nDESCRIPTION: does thing\n---\nstep 1\nstep 2"
        )
        assert draft.name == "Foo"
        assert draft.category == "crm"
        assert draft.description == "does thing"
        assert draft.instructions == "step 1\nstep 2"

    def test_defaults(self):
        draft = parse_feature_text("NAME: Only a name")
        assert draft.category == config.DEFAULT_CATEGORY
        assert draft.description == "Only a name"
        assert draft.instructions is None

    def test_instructions_kept_verbatim(self):
        body = "  indented line\n\nNAME: not a header\n--- inner rule"
        draft = parse_feature_text(f"NAME: X\n---\n{body}\n")
        assert draft.instructions == body
        assert draft.name == "X"

    def test_markers_are_case_insensitive(self):
        draft = parse_feature_text("name: lower\ncategory: ops")
        assert (draft.name, draft.category) == ("lower", "ops")

    def test_unknown_header_lines_ignored(self):
        draft = parse_feature_text("OWNER: someone\nNAME: Foo\n---\nbody")
        assert draft.name == "Foo"

    @pytest.mark.parametrize("text", [
        "",
        "CATEGORY: crm\nDESCRIPTION: x\n---\nsteps",
        "NAME:   \n---\nsteps",
        "---\nNAME: after separator",
    ])
    def test_missing_name_rejected(self, text):
        with pytest.raises(ValidationError):
            parse_feature_text(text)

    def test_crlf_instructions_untouched(self):
        draft = parse_feature_text("NAME: X\r\n---\r\nstep 1\r\nstep 2")
        assert draft.name == "X"
        assert draft.instructions == "step 1\r\nstep 2"

    def test_unusual_line_breaks_kept_in_instructions(self):
        body = "page one\x0cpage two same line"
        draft = parse_feature_text(f"NAME: X\n---\n{body}")
        assert draft.instructions == body
