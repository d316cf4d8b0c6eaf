"""
Unit tests for child environment construction.
"""

import os

import pytest

from buildexec.system import merge_environment


@pytest.mark.unit
class TestMergeEnvironment:
    """Test cases for merge_environment."""

    def test_override_wins(self):
        merged = merge_environment({"A": "new"}, base={"A": "old", "B": "keep"})

        assert merged == {"A": "new", "B": "keep"}

    def test_returns_fresh_copy(self):
        base = {"A": "1"}

        merged = merge_environment({}, base=base)
        merged["B"] = "2"

        assert base == {"A": "1"}

    def test_base_not_mutated_by_overrides(self):
        base = {"A": "1"}

        merge_environment({"A": "2", "C": "3"}, base=base)

        assert base == {"A": "1"}

    def test_defaults_to_process_environment(self, monkeypatch):
        monkeypatch.setenv("BUILDEXEC_TEST_INHERITED", "yes")

        merged = merge_environment({})

        assert merged["BUILDEXEC_TEST_INHERITED"] == "yes"
        assert merged is not os.environ

    def test_case_insensitive_replaces_existing_name(self):
        merged = merge_environment(
            {"PATH": r"C:\tools"},
            base={"Path": r"C:\Windows", "TEMP": "x"},
            case_insensitive=True,
        )

        assert merged == {"PATH": r"C:\tools", "TEMP": "x"}

    def test_case_sensitive_keeps_both(self):
        merged = merge_environment(
            {"PATH": "/opt/bin"},
            base={"Path": "/usr/bin"},
            case_insensitive=False,
        )

        assert merged == {"PATH": "/opt/bin", "Path": "/usr/bin"}
