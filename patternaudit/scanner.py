"""Compliance scanner - drives selection, per-file analysis and aggregation."""

import os
import threading
import time
from collections.abc import Iterable, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Any

from patternaudit.config_runtime import ServiceConfig, load_runtime_config
from patternaudit.detectors import DetectorSet, default_detectors, load_detectors
from patternaudit.extractor import RegexStructuralExtractor, StructuralExtractor
from patternaudit.file_selector import select_files
from patternaudit.models import FileReport, ProjectReport, ScanResult
from patternaudit.reporter import aggregate
from patternaudit.rule_engine import RuleEngine
from patternaudit.utils.constants import DEFAULT_TARGET, SCANNED_EXTENSIONS, TOP_OFFENDERS_LIMIT
from patternaudit.utils.helpers import relative_posix
from patternaudit.utils.logging import logger

# How often the collector wakes up to check for cancellation
POLL_INTERVAL = 0.05

INTERRUPTED_READ = "Error checking file: scan interrupted before the file was fully analyzed"


class ComplianceScanner:
    """Scans a source tree for validation/formatting anti-patterns."""

    def __init__(
        self,
        project_root: Path | str,
        detectors: DetectorSet | None = None,
        services: ServiceConfig | None = None,
        extractor: StructuralExtractor | None = None,
        max_workers: int | None = None,
        extensions: Iterable[str] = SCANNED_EXTENSIONS,
        include_hidden: bool = False,
        default_target: str = DEFAULT_TARGET,
        top_offenders: int = TOP_OFFENDERS_LIMIT,
        timeout: float | None = None,
    ):
        self.project_root = Path(project_root).resolve()
        self.services = services or ServiceConfig()
        self.detectors = detectors if detectors is not None else default_detectors()
        self.extractor = extractor or RegexStructuralExtractor(self.services)
        self.engine = RuleEngine(self.detectors, self.services)
        self.max_workers = max(1, max_workers or min(8, os.cpu_count() or 4))
        self.extensions = tuple(extensions)
        self.include_hidden = include_hidden
        self.default_target = default_target
        self.top_offenders = top_offenders
        self.timeout = timeout or None

        logger.debug(
            f"[SCANNER] {len(self.detectors)} detectors, {self.max_workers} workers, "
            f"root={self.project_root}"
        )

    @classmethod
    def from_config(
        cls,
        project_root: Path | str,
        cfg: dict[str, Any] | None = None,
        detectors: DetectorSet | None = None,
    ) -> "ComplianceScanner":
        """Build a scanner from runtime configuration (see config_runtime)."""
        cfg = cfg if cfg is not None else load_runtime_config(project_root)
        scan_cfg = cfg["scan"]

        if detectors is None and cfg["rules"]["detectors_file"]:
            detectors_file = Path(project_root) / cfg["rules"]["detectors_file"]
            detectors = load_detectors(detectors_file)

        return cls(
            project_root,
            detectors=detectors,
            services=ServiceConfig.from_config(cfg),
            max_workers=scan_cfg["max_workers"],
            extensions=scan_cfg["extensions"],
            include_hidden=scan_cfg["include_hidden"],
            default_target=scan_cfg["default_target"],
            top_offenders=scan_cfg["top_offenders"],
            timeout=cfg["timeouts"]["scan"],
        )

    def analyze_text(self, path: str, content: str) -> FileReport:
        """Extract facts and evaluate detectors for already-read text."""
        facts = self.extractor.extract(content)
        evaluation = self.engine.evaluate(
            content,
            uses_validation_service=facts.uses_validation_service,
            uses_formatter_service=facts.uses_formatter_service,
            file_path=path,
        )
        return FileReport(
            path=path,
            facts=facts,
            issues=evaluation.issues,
            detector_failures=evaluation.failures,
        )

    def analyze_file(self, file_path: Path) -> FileReport:
        """Read one file completely, then analyze it.

        Read failures (permissions, the file vanishing, invalid UTF-8) produce
        an error report; analysis never starts on a partial read.
        """
        rel_path = relative_posix(file_path, self.project_root)
        try:
            content = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {rel_path}: {e}")
            return FileReport.read_failure(rel_path, f"Error checking file: {e}")
        return self.analyze_text(rel_path, content)

    def scan(
        self,
        target: str | None = None,
        fix: bool = False,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ScanResult:
        """Scan ``target`` (relative to the project root).

        Returns a ScanResult carrying either the report or a TargetNotFound
        error. Per-file and per-detector problems stay inside the report.
        """
        target = target or self.default_target
        selection = select_files(
            self.project_root,
            target,
            extensions=self.extensions,
            include_hidden=self.include_hidden,
        )
        if not selection.ok:
            logger.info(selection.error.message)
            return ScanResult(error=selection.error)

        logger.info(f"Found {len(selection.files)} files to scan under {target}")
        report = self.scan_files(
            selection.files,
            fix=fix,
            timeout=timeout if timeout is not None else self.timeout,
            cancel_event=cancel_event,
        )
        return ScanResult(report=report)

    def scan_files(
        self,
        files: Sequence[Path],
        fix: bool = False,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ProjectReport:
        """Analyze ``files`` on a bounded worker pool and aggregate the results.

        Results are slotted by position in ``files``. When ``timeout`` seconds
        pass or ``cancel_event`` is set, files that never started are left out
        (listed as not scanned) and files still being analyzed are recorded
        as read errors; the report is marked incomplete.
        """
        files = list(files)
        reports: list[FileReport | None] = [None] * len(files)
        reason = None

        if files:
            reason = self._run_pool(files, reports, timeout, cancel_event)

        if reason:
            logger.warning(f"Scan incomplete ({reason})")

        report = aggregate(
            self.project_root,
            files,
            reports,
            services=self.services,
            top_offenders=self.top_offenders,
            incomplete_reason=reason,
            fix_requested=fix,
        )
        logger.info(
            f"Scanned {report.files_scanned} files, {report.total_issues} issues "
            f"in {len(report.files_with_issues)} files"
        )
        return report

    def _run_pool(
        self,
        files: list[Path],
        reports: list[FileReport | None],
        timeout: float | None,
        cancel_event: threading.Event | None,
    ) -> str | None:
        deadline = time.monotonic() + timeout if timeout else None
        reason = None

        def process_file(file_path: Path) -> FileReport | None:
            if cancel_event is not None and cancel_event.is_set():
                return None
            return self.analyze_file(file_path)

        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(files)))
        try:
            futures: dict[Future, int] = {
                executor.submit(process_file, path): index for index, path in enumerate(files)
            }
            pending = set(futures)

            while pending:
                if cancel_event is not None and cancel_event.is_set():
                    reason = "cancelled"
                    break

                wait_for = POLL_INTERVAL if cancel_event is not None else None
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        reason = "deadline exceeded"
                        break
                    wait_for = remaining if wait_for is None else min(wait_for, remaining)

                done, pending = wait(pending, timeout=wait_for, return_when=FIRST_COMPLETED)
                for future in done:
                    reports[futures[future]] = future.result()

            for future in pending:
                if future.cancel():
                    continue
                index = futures[future]
                if future.done():
                    reports[index] = future.result()
                else:
                    rel_path = relative_posix(files[index], self.project_root)
                    reports[index] = FileReport.read_failure(rel_path, INTERRUPTED_READ)

            # Workers that saw the cancel flag before reading return None
            if reason is None and cancel_event is not None and cancel_event.is_set():
                if any(report is None for report in reports):
                    reason = "cancelled"
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return reason
