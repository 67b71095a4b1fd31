# -*- coding: utf-8 -*-
"""
Family Registry Repository Layer (client-local storage)
"""

# Lazy imports to avoid circular dependencies
__all__ = [
    "Database",
    "DraftRepository",
    "SettingsRepository",
]


def __getattr__(name):
    """Lazy import to avoid circular dependencies."""
    if name == "Database":
        from .database import Database
        return Database
    elif name == "DraftRepository":
        from .draft_repository import DraftRepository
        return DraftRepository
    elif name == "SettingsRepository":
        from .settings_repository import SettingsRepository
        return SettingsRepository
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
