"""Evaluates a detector set against a file's raw text."""

import re
from dataclasses import dataclass, field

from patternaudit.config_runtime import ServiceConfig
from patternaudit.detectors import Detector, DetectorSet, default_detectors
from patternaudit.models import DetectorFailure, Issue
from patternaudit.suggestions import get_suggestion
from patternaudit.utils.logging import logger


@dataclass(frozen=True)
class Evaluation:
    """Issues produced for one file plus any detectors that had to be skipped."""

    issues: tuple[Issue, ...] = ()
    failures: tuple[DetectorFailure, ...] = field(default_factory=tuple)


def locate_line(content: str, lines: list[str], matched: str, start: int) -> int:
    """1-based number of the first line containing ``matched``.

    This can point at an earlier, unrelated line that happens to contain the
    same text. A match spanning several lines is reported at the line where
    it starts.
    """
    for index, line in enumerate(lines):
        if matched in line:
            return index + 1
    return content.count("\n", 0, start) + 1


class RuleEngine:
    """Runs every detector, in order, over the full text of a file."""

    def __init__(
        self,
        detectors: DetectorSet | None = None,
        services: ServiceConfig | None = None,
    ):
        self.detectors = detectors if detectors is not None else default_detectors()
        self.services = services or ServiceConfig()

    def evaluate(
        self,
        content: str,
        uses_validation_service: bool = False,
        uses_formatter_service: bool = False,
        file_path: str = "",
    ) -> Evaluation:
        lines = content.split("\n")
        issues: list[Issue] = []
        failures: list[DetectorFailure] = []

        for detector in self.detectors:
            try:
                first_seen = self._distinct_matches(detector, content)
                message = detector.render_message(self.services)
            except (re.error, RecursionError, KeyError, IndexError, ValueError) as e:
                logger.debug(f"Detector '{detector.id}' skipped for {file_path or '<text>'}: {e}")
                failures.append(DetectorFailure(detector.id, f"{type(e).__name__}: {e}"))
                continue

            for matched, start in first_seen.items():
                line = locate_line(content, lines, matched, start)
                issues.append(
                    Issue(
                        detector_id=detector.id,
                        severity=detector.severity,
                        line=line,
                        content=lines[line - 1].strip(),
                        message=message,
                        suggestion=get_suggestion(
                            matched,
                            detector,
                            uses_validation_service,
                            uses_formatter_service,
                            self.services,
                        ),
                    )
                )

        return Evaluation(issues=tuple(issues), failures=tuple(failures))

    @staticmethod
    def _distinct_matches(detector: Detector, content: str) -> dict[str, int]:
        """Distinct matched substrings in first-seen order, with their first offset.

        Repeats of the same text collapse into one entry even when they sit on
        different lines.
        """
        first_seen: dict[str, int] = {}
        for match in detector.finditer(content):
            matched = match.group(0)
            if matched and matched not in first_seen:
                first_seen[matched] = match.start()
        return first_seen
