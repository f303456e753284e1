"""Tests for shared string helpers."""

from cvmatch.utils import contains_ignore_case, dedupe_preserving_order


class TestContainsIgnoreCase:
    def test_matches_different_case(self):
        assert contains_ignore_case(["Python", "SQL"], "python")

    def test_no_match(self):
        assert not contains_ignore_case(["Python"], "java")

    def test_empty_list(self):
        assert not contains_ignore_case([], "python")


class TestDedupePreservingOrder:
    def test_keeps_first_occurrence(self):
        assert dedupe_preserving_order(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_is_case_sensitive(self):
        assert dedupe_preserving_order(["Go", "go"]) == ["Go", "go"]
