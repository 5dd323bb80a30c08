"""Runs the test examples of spec files and reports failures and coverage."""

import io
import logging
import os
import sys
import time
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from .config import HarnessConfig
from .cover import CoverTracker
from .engine import Transcriber
from .models import Mismatch, TestReport
from .reporting import log_summary
from .spec import load_spec
from .types import Spec

logger = logging.getLogger(__name__)


class TestRunner:
    """
    Drives the test examples of spec files through the engine.

    Mismatches are printed as they occur and never stop the run. Open and
    parse errors propagate and end the run.
    """

    __test__ = False

    def __init__(self, config: HarnessConfig, out: TextIO | None = None) -> None:
        """
        Initialize the runner.

        Args:
            config: The harness options.
            out: Destination of report lines; defaults to stdout.

        """
        self.config = config
        self.out = out or sys.stdout
        self.cover = CoverTracker(enabled=config.coverage_enabled)

    def _run_spec(self, path: str, spec: Spec, report: TestReport) -> None:
        transcriber = Transcriber(spec)
        for example in spec.tests:
            if self.config.coverage_enabled:
                actual, trace = transcriber.transcribe_trace(example.word)
                for entry in trace:
                    if entry.rule is not None:
                        self.cover.cover(path, entry.phase, entry.rule.id)
            else:
                actual = transcriber.transcribe(example.word)

            report.examples += 1
            if actual == example.expected:
                continue

            mismatch = Mismatch(path=path, word=example.word, actual=actual, expected=example.expected)
            report.mismatches.append(mismatch)
            print(mismatch, file=self.out)

    def _write_profile(self, profile_path: Path) -> None:
        # An existing profile is only replaced by a complete one.
        buffer = io.StringIO()
        self.cover.write_profile(buffer)
        with profile_path.open("w", encoding="utf-8") as f:
            f.write(buffer.getvalue())
        logger.info("Coverage profile written to %s", profile_path)

    def run(self, paths: Iterable[str | Path]) -> TestReport:
        """
        Test every spec file in the given order.

        The profile and the coverage line are produced even when examples fail.

        Args:
            paths: Spec files to test.

        Returns:
            The report of the run.

        Raises:
            SourceOpenError: If a spec file cannot be read.
            SourceParseError: If a spec file cannot be parsed.

        """
        start_time = time.monotonic()
        report = TestReport()

        for raw_path in paths:
            path = os.fspath(raw_path)
            spec = load_spec(path)
            self.cover.visit(path)
            report.files.append(path)
            logger.debug("Testing %d example(s) from %s", len(spec.tests), path)
            self._run_spec(path, spec, report)

        if self.config.profile_path is not None:
            self._write_profile(self.config.profile_path)

        if self.config.coverage_enabled:
            report.coverage = self.cover.coverage()
            print(f"coverage: {report.coverage * 100:.1f}% of rules", file=self.out)

        log_summary(report, time.monotonic() - start_time)
        return report
