"""Centralized exit codes for the paudit CLI."""


class ExitCodes:
    """Standard exit codes for paudit commands."""

    SUCCESS = 0

    HIGH_SEVERITY = 1

    TASK_INCOMPLETE = 3

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success - No high severity issues found",
            cls.HIGH_SEVERITY: "High severity issues detected",
            cls.TASK_INCOMPLETE: "Scan could not be completed (target missing or deadline hit)",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")
