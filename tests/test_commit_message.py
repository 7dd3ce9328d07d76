"""Tests for taskflow.git.commit_message."""

import pytest

from taskflow.git.commit_message import (
    build_commit_message,
    parse_commit_message,
    validate_commit_message_format,
)


class TestBuild:

    def test_with_body(self):
        msg = build_commit_message("feat", "1", "1.1.0", "Add login form", ["- form fields", "- validation"], "1.1")
        assert msg == "feat(F1): T1.1.0 - Add login form\n\n- form fields\n- validation\n\nStory: S1.1"

    def test_without_body(self):
        msg = build_commit_message("fix", "0", "0.1.3", "Fix typo", [], "0.1")
        assert msg == "fix(F0): T0.1.3 - Fix typo\n\nStory: S0.1"

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            build_commit_message("feature", "1", "1.1.0", "x", [], "1.1")


class TestParse:

    def test_parses_all_parts(self):
        parts = parse_commit_message("feat(F1): T1.1.0 - Add login form\n\n- form fields\n\nStory: S1.1\n")
        assert parts.type == "feat"
        assert parts.feature_id == "1"
        assert parts.task_id == "1.1.0"
        assert parts.title == "Add login form"
        assert parts.body == "- form fields"
        assert parts.story_id == "1.1"

    def test_no_body(self):
        parts = parse_commit_message("chore(F2): T2.1.0 - Bump deps\n\nStory: S2.1")
        assert parts.body is None
        assert parts.story_id == "2.1"

    @pytest.mark.parametrize("header", [
        "feat: T1.1.0 - missing feature",
        "feat(F1): 1.1.0 - missing T prefix",
        "feat(F1): T1.1 - short task id",
        "feature(F1): T1.1.0 - bad type",
        "feat(F1):T1.1.0 - no space",
        "",
    ])
    def test_rejects_bad_headers(self, header):
        assert parse_commit_message(header + "\n\nStory: S1.1") is None

    def test_validate_requires_story_footer(self):
        assert validate_commit_message_format("feat(F1): T1.1.0 - Add form\n\nStory: S1.1")
        assert not validate_commit_message_format("feat(F1): T1.1.0 - Add form")
        assert not validate_commit_message_format("Add form\n\nStory: S1.1")

    def test_build_then_parse(self):
        msg = build_commit_message("test", "3", "3.2.1", "Cover refunds", ["line one"], "3.2")
        parts = parse_commit_message(msg)
        assert (parts.type, parts.task_id, parts.story_id, parts.body) == ("test", "3.2.1", "3.2", "line one")
