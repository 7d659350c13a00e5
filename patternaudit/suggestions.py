"""Remediation hints for detector matches."""

from patternaudit.config_runtime import ServiceConfig
from patternaudit.detectors import Detector

FORMATTING_TOKENS = ("trim", "replace", "substring")


def get_suggestion(
    matched_text: str,
    detector: Detector,
    uses_validation_service: bool,
    uses_formatter_service: bool,
    services: ServiceConfig | None = None,
) -> str:
    """Map a matched substring to a remediation hint.

    Checked in priority order: regex ``.test(``, regex ``.match(``, string
    formatting calls, then a generic hint naming whichever helper services the
    file does not use yet.
    """
    services = services or ServiceConfig()
    validator_hint = (
        f"Use {services.validation_service}.createValidator() or a specific validator "
        f"from {services.helper_module} instead of regex"
    )

    if ".test(" in matched_text:
        return f"{validator_hint} tests"
    if ".match(" in matched_text:
        return f"{validator_hint} matching"
    if any(token in matched_text for token in FORMATTING_TOKENS):
        return (
            f"Consider using {services.formatter_service}.formatValue() "
            "for consistent string formatting"
        )

    unused = []
    if not uses_validation_service:
        unused.append(services.validation_service)
    if not uses_formatter_service:
        unused.append(services.formatter_service)

    if unused:
        return f"Consider using the appropriate method from {' or '.join(unused)} instead"
    return "Consider using the appropriate method from the existing services instead"
