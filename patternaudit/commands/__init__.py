"""CLI commands for patternaudit."""
