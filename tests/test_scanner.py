"""End-to-end scanner tests over small on-disk projects."""

import json
import threading

from patternaudit.detectors import Detector, DetectorSet, default_detectors
from patternaudit.extractor import RegexStructuralExtractor
from patternaudit.models import ScanErrorKind, Severity
from patternaudit.reporter import to_json
from patternaudit.scanner import INTERRUPTED_READ, ComplianceScanner

MATCH_AND_TRIM = "const z = x.match(/a/)\nconst y = s.trim()\n"

BOTH_SERVICES = (
    "import { ValidationService, FormatterService } from '@/lib/validation'\n"
    "export const ok = ValidationService.isEmail(v) && FormatterService.formatValue(v)\n"
)


class BlockingExtractor(RegexStructuralExtractor):
    """Extractor that parks every worker until ``gate`` is released."""

    def __init__(self, gate: threading.Event):
        super().__init__()
        self.gate = gate

    def extract(self, content):
        self.gate.wait(timeout=10)
        return super().extract(content)


def test_single_file_target(project, scanner):
    project.write("src/components/Form.tsx", MATCH_AND_TRIM)

    result = scanner.scan("src/components/Form.tsx")

    assert result.ok
    report = result.report
    assert report.files_scanned == 1
    assert report.total_issues == 2
    detail = report.files_with_issues[0]
    assert detail.path == "src/components/Form.tsx"
    assert [i.detector_id for i in detail.issues] == ["regex-match", "string-manipulation"]
    assert report.severity_counts["high"] >= 1
    assert detail.suggested_fix == scanner.services.suggested_import


def test_default_target_is_components_directory(project, scanner):
    project.write("src/components/Form.tsx", MATCH_AND_TRIM)
    project.write("src/other/Ignored.tsx", MATCH_AND_TRIM)

    report = scanner.scan().report

    assert report.files_scanned == 1
    assert [d.path for d in report.files_with_issues] == ["src/components/Form.tsx"]


def test_compliant_file_is_scanned_but_not_reported(project, scanner):
    project.write("src/components/Good.tsx", BOTH_SERVICES)
    project.write("src/components/Bad.tsx", MATCH_AND_TRIM)

    report = scanner.scan("src/components").report

    assert report.files_scanned == 2
    assert [d.path for d in report.files_with_issues] == ["src/components/Bad.tsx"]


def test_file_using_both_services_has_no_issues(scanner):
    report = scanner.analyze_text("Good.tsx", BOTH_SERVICES)

    assert report.uses_validation_service is True
    assert report.uses_formatter_service is True
    assert report.facts.references_helper_module is True
    assert report.issue_count == 0
    assert report.detector_failures == ()


def test_root_relative_target_stays_inside_project(project, scanner):
    project.write("src/components/Form.tsx", MATCH_AND_TRIM)

    report = scanner.scan("/src/components").report

    assert report.files_scanned == 1
    assert [d.path for d in report.files_with_issues] == ["src/components/Form.tsx"]


def test_target_outside_project_is_not_found(tmp_path):
    root = tmp_path / "app"
    (root / "src").mkdir(parents=True)
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.ts").write_text("const z = x.match(/a/)\n", encoding="utf-8")

    result = ComplianceScanner(root).scan("../outside")

    assert not result.ok
    assert result.error.kind == ScanErrorKind.TARGET_NOT_FOUND
    assert result.error.message == "Target not found: ../outside"


def test_files_scanned_matches_candidate_count(project, scanner):
    for name in ("a.ts", "b.tsx", "nested/c.js", "nested/deep/d.jsx"):
        project.write(f"src/components/{name}", "export const x = 1\n")
    project.write("src/components/readme.md", "x.match(/a/)")
    project.write("src/components/styles.css", "a { }")

    report = scanner.scan("src/components").report

    expected = [
        p
        for p in (project.root / "src/components").rglob("*")
        if p.suffix in (".ts", ".tsx", ".js", ".jsx")
    ]
    assert report.files_scanned == len(expected) == 4
    assert report.total_issues == 0
    assert report.complete is True


def test_repeat_scans_produce_identical_json(project):
    for index in range(12):
        project.write(f"src/components/f{index:02d}.ts", MATCH_AND_TRIM * (index % 3 + 1))

    first = to_json(ComplianceScanner(project.root, max_workers=4).scan().report)
    second = to_json(ComplianceScanner(project.root, max_workers=2).scan().report)

    assert first == second
    assert json.loads(first)["filesScanned"] == 12


def test_top_offenders_are_stable_across_ties(project, scanner):
    one = "const y = s.trim()\n"
    two = one + "const z = x.match(/a/)\n"
    three = two + "const r = new RegExp('a')\n"
    sources = {
        "a.ts": one,
        "b.ts": three,
        "c.ts": two,
        "d.ts": three,
        "e.ts": one,
        "f.ts": two,
        "g.ts": one,
    }
    for name, content in sources.items():
        project.write(f"src/components/{name}", content)

    report = scanner.scan().report

    ranked = [(d.path.rsplit("/", 1)[-1], d.issue_count) for d in report.files_with_issues]
    assert ranked == [
        ("b.ts", 3),
        ("d.ts", 3),
        ("c.ts", 2),
        ("f.ts", 2),
        ("a.ts", 1),
        ("e.ts", 1),
        ("g.ts", 1),
    ]
    assert len(report.top_offenders) == 5
    assert [o.path for o in report.top_offenders] == [
        d.path for d in report.files_with_issues[:5]
    ]
    assert sum(report.severity_counts.values()) == report.total_issues == 13


def test_unreadable_file_becomes_error_entry(project, scanner):
    project.write_bytes("src/components/broken.ts", b"const a = '\xff\xfe'\n")
    project.write("src/components/ok.ts", MATCH_AND_TRIM)

    report = scanner.scan().report

    assert report.files_scanned == 2
    assert [e.path for e in report.errors] == ["src/components/broken.ts"]
    assert report.errors[0].kind == ScanErrorKind.FILE_READ_ERROR
    assert report.errors[0].message.startswith("Error checking file:")
    assert [d.path for d in report.files_with_issues] == ["src/components/ok.ts"]


def test_missing_target_reads_nothing(project, scanner):
    result = scanner.scan("src/nope")

    assert not result.ok
    assert result.report is None
    assert result.error.kind == ScanErrorKind.TARGET_NOT_FOUND
    assert result.error.message == "Target not found: src/nope"


def test_empty_directory_gives_empty_complete_report(project, scanner):
    (project.root / "src" / "components").mkdir(parents=True)

    report = scanner.scan().report

    assert report.files_scanned == 0
    assert report.files_with_issues == ()
    assert report.complete is True


def test_deadline_marks_report_incomplete(project):
    for name in ("a.ts", "b.ts", "c.ts"):
        project.write(f"src/components/{name}", MATCH_AND_TRIM)
    gate = threading.Event()
    scanner = ComplianceScanner(project.root, extractor=BlockingExtractor(gate), max_workers=1)

    try:
        report = scanner.scan(timeout=0.2).report
    finally:
        gate.set()

    assert report.complete is False
    assert report.incomplete_reason == "deadline exceeded"
    assert [e.message for e in report.errors] == [INTERRUPTED_READ]
    assert report.errors[0].path == "src/components/a.ts"
    assert list(report.files_not_scanned) == ["src/components/b.ts", "src/components/c.ts"]
    assert report.files_with_issues == ()


def test_cancelled_scan_is_incomplete(project, scanner):
    for index in range(5):
        project.write(f"src/components/f{index}.ts", MATCH_AND_TRIM)
    cancel = threading.Event()
    cancel.set()

    report = scanner.scan(cancel_event=cancel).report

    assert report.complete is False
    assert report.incomplete_reason == "cancelled"
    assert report.files_with_issues == ()
    assert report.to_dict()["complete"] is False


def test_fix_flag_is_recorded_without_touching_files(project, scanner):
    path = project.write("src/components/Form.tsx", MATCH_AND_TRIM)

    data = scanner.scan(fix=True).report.to_dict()

    assert data["fixRequested"] is True
    assert path.read_text(encoding="utf-8") == MATCH_AND_TRIM


def test_failing_detector_is_reported_inline(project):
    detectors = DetectorSet((
        Detector(id="broken", pattern="[", message="never", severity="low"),
        default_detectors().get("regex-match"),
    ))
    project.write("src/components/Form.tsx", MATCH_AND_TRIM)

    report = ComplianceScanner(project.root, detectors=detectors).scan().report

    detail = report.to_dict()["detail"][0]
    assert [i["detectorId"] for i in detail["issues"]] == ["regex-match"]
    assert detail["detectorFailures"][0]["detectorId"] == "broken"
    assert detail["detectorFailures"][0]["kind"] == "DetectorEvaluationError"
    assert report.severity_counts == {"high": 1, "medium": 0, "low": 0}


def test_from_config_uses_custom_detectors_file(project):
    project.write(
        "rules.yml",
        "detectors:\n"
        "  - id: console-log\n"
        "    pattern: 'console\\.log\\('\n"
        "    message: Use the logger\n"
        "    severity: low\n",
    )
    project.write(".paudit/config.json", json.dumps({"rules": {"detectors_file": "rules.yml"}}))
    project.write("src/components/a.ts", "console.log(1)\nx.match(/a/)\n")

    scanner = ComplianceScanner.from_config(project.root)
    report = scanner.scan().report

    assert scanner.detectors.ids == ("console-log",)
    issues = report.files_with_issues[0].issues
    assert [(i.detector_id, i.severity) for i in issues] == [("console-log", Severity.LOW)]
