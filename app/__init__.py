# -*- coding: utf-8 -*-
"""
Family Registry Application Core Module
"""

from .config import Config, Vocabularies

__all__ = ["Config", "Vocabularies", "AppContext"]


def __getattr__(name):
    """Lazy import to avoid circular dependencies."""
    if name == "AppContext":
        from .context import AppContext
        return AppContext
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
