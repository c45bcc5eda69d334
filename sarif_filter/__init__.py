"""SARIF suppression filter package."""

__all__ = [
    "cli",
    "config",
    "engine",
    "loader",
    "models",
    "reporting",
    "suppression",
]
