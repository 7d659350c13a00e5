"""patternaudit - source pattern compliance checks for centralized validation helpers."""

__version__ = "0.1.0"
