"""
Utilities package for the Activity Store.

Exports shared helpers for logging and other cross-cutting concerns.
Keep this package lightweight and free of domain-specific logic.
"""

from activity_store.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
