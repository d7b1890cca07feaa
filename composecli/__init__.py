"""Command-line front end and library for multi-container application projects."""

__version__ = "0.1.0"
__all__ = [
    "actions",
    "cli",
    "compatibility",
    "errors",
    "events",
    "formatter",
    "images",
    "labels",
    "listing",
    "logs",
    "model",
    "options",
    "proxy",
    "ps",
    "top",
    "version",
]