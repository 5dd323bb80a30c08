"""Handles the end-of-run summary of a test run."""

import logging
from collections import Counter
from typing import Any

from .models import TestReport

logger = logging.getLogger(__name__)


def _calculate_metrics(report: TestReport) -> dict[str, Any]:
    """
    Calculate summary metrics from a test report.

    Args:
        report: The finished test report.

    Returns:
        A dictionary of counts for the summary.

    """
    failures_by_file = Counter(mismatch.path for mismatch in report.mismatches)
    return {
        "files": len(report.files),
        "examples": report.examples,
        "passed": report.examples - len(report.mismatches),
        "failed": len(report.mismatches),
        "failures_by_file": dict(failures_by_file),
        "coverage": report.coverage,
    }


def log_summary(report: TestReport, total_run_time: float) -> None:
    """
    Log the summary of a test run.

    Args:
        report: The finished test report.
        total_run_time: Wall time of the run in seconds.

    """
    metrics = _calculate_metrics(report)

    logger.info("%s", "=" * 40)
    logger.info(" hglkit - Test Summary")
    logger.info("=" * 40)
    logger.info("- Total Run Time: %.2f seconds", total_run_time)
    logger.info("- Spec Files Tested: %s", metrics["files"])
    logger.info("- Examples Run: %s", metrics["examples"])
    logger.info("- Passed: %s", metrics["passed"])
    logger.info("- Failed: %s", metrics["failed"])

    if metrics["failures_by_file"]:
        logger.info("--- Failures By File ---")
        for path, count in sorted(metrics["failures_by_file"].items(), key=lambda item: item[1], reverse=True):
            logger.info("- %s: %s", path, count)

    if metrics["coverage"] is not None:
        logger.info("- Rule Coverage: %.1f%%", metrics["coverage"] * 100)
