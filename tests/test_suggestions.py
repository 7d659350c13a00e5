"""Tests for remediation hint generation."""

import pytest

from patternaudit.config_runtime import ServiceConfig
from patternaudit.detectors import default_detectors
from patternaudit.suggestions import get_suggestion


@pytest.fixture
def detector():
    return default_detectors().get("string-manipulation")


@pytest.mark.parametrize(
    "matched, ending",
    [
        (".test(/a/)", "instead of regex tests"),
        ("/a/.test(", "instead of regex tests"),
        (".match(/a/)", "instead of regex matching"),
    ],
)
def test_regex_calls_point_to_validators(detector, matched, ending):
    suggestion = get_suggestion(matched, detector, False, False)

    assert suggestion.startswith("Use ValidationService.createValidator()")
    assert "@/lib/validation" in suggestion
    assert suggestion.endswith(ending)


def test_test_call_wins_over_formatting_tokens(detector):
    suggestion = get_suggestion("s.trim().test(", detector, False, False)

    assert suggestion.endswith("regex tests")


@pytest.mark.parametrize("matched", [".trim(", ".replace(", ".substring(", ".replaceAll("])
def test_formatting_calls_point_to_formatter(detector, matched):
    suggestion = get_suggestion(matched, detector, False, False)

    assert suggestion == (
        "Consider using FormatterService.formatValue() for consistent string formatting"
    )


def test_generic_hint_names_unused_services(detector):
    assert get_suggestion(".toLowerCase(", detector, False, False) == (
        "Consider using the appropriate method from ValidationService or FormatterService instead"
    )
    assert get_suggestion(".toLowerCase(", detector, True, False) == (
        "Consider using the appropriate method from FormatterService instead"
    )
    assert get_suggestion(".toLowerCase(", detector, False, True) == (
        "Consider using the appropriate method from ValidationService instead"
    )


def test_generic_hint_omits_services_already_in_use(detector):
    suggestion = get_suggestion(".padStart(", detector, True, True)

    assert suggestion == "Consider using the appropriate method from the existing services instead"
    assert "ValidationService" not in suggestion
    assert "FormatterService" not in suggestion


def test_configured_service_names_are_used(detector):
    services = ServiceConfig(
        helper_module="~/checks", validation_service="Checks", formatter_service="Fmt"
    )

    assert get_suggestion(".match(/a/)", detector, False, False, services).startswith(
        "Use Checks.createValidator() or a specific validator from ~/checks"
    )
    assert "Fmt.formatValue()" in get_suggestion(".trim(", detector, False, False, services)
