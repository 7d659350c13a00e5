"""Detector definitions and the loader for the bundled YAML detector set.

Detectors are plain data: an id, a regular expression, a message template and a
severity. The rule engine never branches on a detector id, so a set can be
extended, trimmed or reordered by composing a new ``DetectorSet``.
"""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from patternaudit.config_runtime import ServiceConfig
from patternaudit.models import Severity
from patternaudit.utils.logging import logger

DEFAULT_DETECTORS_FILE = Path(__file__).parent / "rules" / "validation.yml"

_FLAG_NAMES = {
    "IGNORECASE": re.IGNORECASE,
    "MULTILINE": re.MULTILINE,
    "DOTALL": re.DOTALL,
}


@dataclass(frozen=True)
class Detector:
    """Represents a single anti-pattern rule."""

    id: str
    pattern: str
    message: str
    severity: Severity
    flags: int = 0

    def __post_init__(self):
        object.__setattr__(self, "severity", Severity.parse(self.severity))

    def finditer(self, text: str) -> Iterator[re.Match]:
        """Iterate over matches in ``text``.

        Raises ``re.error`` when the pattern does not compile; the rule engine
        treats that as a failed evaluation for this detector only.
        """
        return _compile(self.pattern, self.flags).finditer(text)

    def render_message(self, services: ServiceConfig) -> str:
        return self.message.format(
            validation_service=services.validation_service,
            formatter_service=services.formatter_service,
            helper_module=services.helper_module,
        )


@lru_cache(maxsize=256)
def _compile(pattern: str, flags: int) -> re.Pattern:
    return re.compile(pattern, flags)


@dataclass(frozen=True)
class DetectorSet:
    """Immutable, ordered collection of detectors with unique ids."""

    detectors: tuple[Detector, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "detectors", tuple(self.detectors))
        seen = set()
        for detector in self.detectors:
            if detector.id in seen:
                raise ValueError(f"Duplicate detector id: {detector.id}")
            seen.add(detector.id)

    def __iter__(self) -> Iterator[Detector]:
        return iter(self.detectors)

    def __len__(self) -> int:
        return len(self.detectors)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(d.id for d in self.detectors)

    def get(self, detector_id: str) -> Detector | None:
        for detector in self.detectors:
            if detector.id == detector_id:
                return detector
        return None

    def extended(self, *detectors: Detector) -> "DetectorSet":
        """New set with ``detectors`` appended."""
        return DetectorSet(self.detectors + tuple(detectors))

    def without(self, *detector_ids: str) -> "DetectorSet":
        """New set with the given ids removed; unknown ids are ignored."""
        drop = set(detector_ids)
        return DetectorSet(tuple(d for d in self.detectors if d.id not in drop))

    def reordered(self, detector_ids: Iterable[str]) -> "DetectorSet":
        """New set in the given id order; ids not listed keep their relative order at the end."""
        order = list(detector_ids)
        unknown = [i for i in order if self.get(i) is None]
        if unknown:
            raise KeyError(f"Unknown detector ids: {', '.join(unknown)}")
        listed = set(order)
        head = [self.get(i) for i in order]
        tail = [d for d in self.detectors if d.id not in listed]
        return DetectorSet(tuple(head + tail))


def _parse_flags(names: Any) -> int:
    if not names:
        return 0
    if isinstance(names, str):
        names = [names]
    flags = 0
    for name in names:
        try:
            flags |= _FLAG_NAMES[str(name).upper()]
        except KeyError as e:
            raise ValueError(f"Unknown regex flag '{name}'") from e
    return flags


def _build_detector(data: dict[str, Any]) -> Detector:
    detector = Detector(
        id=str(data["id"]),
        pattern=str(data["pattern"]),
        message=str(data["message"]),
        severity=data.get("severity", "medium"),
        flags=_parse_flags(data.get("flags")),
    )

    try:
        _compile(detector.pattern, detector.flags)
    except re.error as e:
        raise ValueError(f"Invalid regex in detector '{detector.id}': {e}") from e

    try:
        detector.render_message(ServiceConfig())
    except (KeyError, IndexError, ValueError) as e:
        raise ValueError(f"Invalid message template in detector '{detector.id}': {e}") from e

    return detector


def load_detectors(file_path: Path | str | None = None) -> DetectorSet:
    """Load a detector set from a YAML file.

    Args:
        file_path: YAML file with a top-level ``detectors`` list.
                   Defaults to the bundled rules/validation.yml.

    Returns:
        DetectorSet in file order. Invalid entries are skipped with a warning.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a detector file.
    """
    path = Path(file_path) if file_path else DEFAULT_DETECTORS_FILE
    if not path.exists():
        raise FileNotFoundError(f"Detectors file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or not isinstance(data.get("detectors"), list):
        raise ValueError(f"Invalid detector file format in {path}")

    detectors = []
    seen = set()
    for entry in data["detectors"]:
        try:
            detector = _build_detector(entry)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping invalid detector in {path}: {e}")
            continue
        if detector.id in seen:
            logger.warning(f"Skipping duplicate detector id '{detector.id}' in {path}")
            continue
        seen.add(detector.id)
        detectors.append(detector)

    logger.debug(f"Loaded {len(detectors)} detectors from {path}")
    return DetectorSet(tuple(detectors))


@lru_cache(maxsize=1)
def default_detectors() -> DetectorSet:
    """Process-wide canonical detector set, loaded once."""
    return load_detectors(DEFAULT_DETECTORS_FILE)
