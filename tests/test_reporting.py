"""Tests for the end-of-run summary."""

import unittest

from hglkit.models import Mismatch, TestReport
from hglkit.reporting import _calculate_metrics, log_summary


class TestReporting(unittest.TestCase):
    """Test suite for the summary reporter."""

    def setUp(self) -> None:
        """Set up a report with two failures in one file."""
        self.report = TestReport(
            files=["a.hgl", "b.hgl"],
            examples=5,
            mismatches=[
                Mismatch(path="a.hgl", word="x", actual="ㅋ", expected="ㅅ"),
                Mismatch(path="a.hgl", word="y", actual="", expected="이"),
            ],
        )

    def test_metrics(self) -> None:
        """1. Metrics: Counts files, passes, failures and failures per file."""
        metrics = _calculate_metrics(self.report)
        assert metrics["files"] == 2
        assert metrics["passed"] == 3
        assert metrics["failed"] == 2
        assert metrics["failures_by_file"] == {"a.hgl": 2}
        assert metrics["coverage"] is None

    def test_log_summary(self) -> None:
        """2. Logging: The summary lists failures by file and coverage when known."""
        self.report.coverage = 0.5
        with self.assertLogs("hglkit.reporting", level="INFO") as cm:
            log_summary(self.report, 1.25)
        assert any("Total Run Time: 1.25 seconds" in log for log in cm.output)
        assert any("- a.hgl: 2" in log for log in cm.output)
        assert any("Rule Coverage: 50.0%" in log for log in cm.output)

    def test_mismatch_line(self) -> None:
        """3. Mismatch: Renders the report line format."""
        assert str(self.report.mismatches[0]) == 'a.hgl: "x" -> "ㅋ", expected: "ㅅ"'
        assert self.report.failed
        assert not TestReport().failed
