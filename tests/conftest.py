"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest

from patternaudit.models import Issue, Severity
from patternaudit.scanner import ComplianceScanner


class ProjectTree:
    """Minimal on-disk project used by scanner and tool tests."""

    def __init__(self, root: Path):
        self.root = root

    def write(self, rel_path: str, content: str) -> Path:
        path = self.root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def write_bytes(self, rel_path: str, data: bytes) -> Path:
        path = self.root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Empty project root; PATTERNAUDIT_* variables are cleared so config is predictable."""
    for key in list(os.environ):
        if key.startswith("PATTERNAUDIT_"):
            monkeypatch.delenv(key, raising=False)
    return ProjectTree(tmp_path)


@pytest.fixture
def scanner(project):
    return ComplianceScanner(project.root, max_workers=4)


@pytest.fixture
def make_issue():
    def _make(severity: Severity = Severity.LOW, detector_id: str = "string-manipulation"):
        return Issue(
            detector_id=detector_id,
            severity=severity,
            line=1,
            content="const y = s.trim()",
            message="String manipulation that might need FormatterService",
            suggestion=(
                "Consider using FormatterService.formatValue() for consistent string formatting"
            ),
        )

    return _make

