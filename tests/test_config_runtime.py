"""Tests for runtime configuration loading."""

import json

from patternaudit.config_runtime import DEFAULTS, ServiceConfig, load_runtime_config


def _write_config(project, data):
    project.write(".paudit/config.json", json.dumps(data))


def test_defaults_without_config_file(project):
    cfg = load_runtime_config(project.root)

    assert cfg == DEFAULTS
    assert cfg is not DEFAULTS
    assert cfg["scan"]["default_target"] == "src/components"
    assert cfg["services"]["helper_module"] == "@/lib/validation"


def test_file_overrides_and_type_mismatches(project):
    _write_config(
        project,
        {
            "scan": {"default_target": "app", "top_offenders": "ten", "unknown": 1},
            "timeouts": {"scan": 30},
            "services": "not a section",
        },
    )

    cfg = load_runtime_config(project.root)

    assert cfg["scan"]["default_target"] == "app"
    assert cfg["scan"]["top_offenders"] == DEFAULTS["scan"]["top_offenders"]
    assert "unknown" not in cfg["scan"]
    assert cfg["timeouts"]["scan"] == 30
    assert cfg["services"] == DEFAULTS["services"]


def test_environment_overrides_file(project, monkeypatch):
    _write_config(project, {"scan": {"default_target": "app"}})
    monkeypatch.setenv("PATTERNAUDIT_SCAN_DEFAULT_TARGET", "lib")
    monkeypatch.setenv("PATTERNAUDIT_SCAN_MAX_WORKERS", "2")
    monkeypatch.setenv("PATTERNAUDIT_SCAN_INCLUDE_HIDDEN", "yes")
    monkeypatch.setenv("PATTERNAUDIT_SCAN_EXTENSIONS", ".ts, .vue")
    monkeypatch.setenv("PATTERNAUDIT_TIMEOUTS_SCAN", "1.5")

    cfg = load_runtime_config(project.root)

    assert cfg["scan"]["default_target"] == "lib"
    assert cfg["scan"]["max_workers"] == 2
    assert cfg["scan"]["include_hidden"] is True
    assert cfg["scan"]["extensions"] == [".ts", ".vue"]
    assert cfg["timeouts"]["scan"] == 1.5


def test_invalid_environment_value_keeps_previous(project, monkeypatch):
    monkeypatch.setenv("PATTERNAUDIT_SCAN_MAX_WORKERS", "many")

    cfg = load_runtime_config(project.root)

    assert cfg["scan"]["max_workers"] == DEFAULTS["scan"]["max_workers"]


def test_invalid_json_falls_back_to_defaults(project):
    project.write(".paudit/config.json", "{not json")

    assert load_runtime_config(project.root) == DEFAULTS


def test_service_config_from_config(project):
    _write_config(project, {"services": {"helper_module": "~/checks", "formatter_service": "Fmt"}})

    services = ServiceConfig.from_config(load_runtime_config(project.root))

    assert services.helper_module == "~/checks"
    assert services.validation_service == "ValidationService"
    assert services.formatter_service == "Fmt"
    assert services.suggested_import == 'import { ValidationService, Fmt } from "~/checks";'
    assert services.import_pattern.search("import { Fmt } from '~/checks'")
    assert not services.import_pattern.search("import { Fmt } from '~/checks/extra'")


def test_helper_dir_default_and_override(project, monkeypatch):
    assert ServiceConfig.from_config(load_runtime_config(project.root)).helper_dir == (
        "src/lib/validation"
    )

    _write_config(project, {"services": {"helper_dir": "lib/checks"}})
    assert ServiceConfig.from_config(load_runtime_config(project.root)).helper_dir == "lib/checks"

    monkeypatch.setenv("PATTERNAUDIT_SERVICES_HELPER_DIR", "shared/validation")
    assert ServiceConfig.from_config(load_runtime_config(project.root)).helper_dir == (
        "shared/validation"
    )
