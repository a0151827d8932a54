"""
Unit Tests — Status Classifier
==============================
Priority order, whole-word matching, and the pending default.
"""
import pytest

from plod.parser.status_classifier import classify


# ---------------------------------------------------------------------------
# 1. Keyword sets
# ---------------------------------------------------------------------------
class TestKeywords:

    @pytest.mark.parametrize("text", ["success", "successful", "passed", "pass", "ok"])
    def test_success_keywords(self, text):
        assert classify(text) == "success"

    @pytest.mark.parametrize("text", ["fail", "failure", "failed", "error", "broken"])
    def test_failure_keywords(self, text):
        assert classify(text) == "failure"

    @pytest.mark.parametrize(
        "text", ["pending", "running", "in-progress", "in progress", "building", "queued"]
    )
    def test_pending_keywords(self, text):
        assert classify(text) == "pending"


# ---------------------------------------------------------------------------
# 2. Priority and normalisation
# ---------------------------------------------------------------------------
class TestPriority:

    def test_passed_with_warnings(self):
        assert classify("Build passed with 0 warnings") == "success"

    def test_success_beats_failure(self):
        assert classify("1 error fixed, build success") == "success"

    def test_failure_beats_pending(self):
        assert classify("job queued after previous run failed") == "failure"

    def test_uppercase_failure(self):
        assert classify("Status: FAILED (2 tests)") == "failure"

    def test_whitespace_trimmed(self):
        assert classify("   \n  SUCCESS \n") == "success"


# ---------------------------------------------------------------------------
# 3. Whole-word matching and defaults
# ---------------------------------------------------------------------------
class TestWholeWord:

    def test_empty_is_pending(self):
        assert classify("") == "pending"

    def test_unrecognised_is_pending(self):
        assert classify("status unknown") == "pending"

    def test_none_is_pending(self):
        assert classify(None) == "pending"

    def test_substring_does_not_match(self):
        # "okay" / "token" / "errors" are not whole-word keywords
        assert classify("okay token errors") == "pending"

    def test_negation_is_not_detected(self):
        """Whole-word matching is not negation aware."""
        assert classify("this is not a success") == "success"
