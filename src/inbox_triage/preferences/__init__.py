"""Persisted presentation preferences (theme and list layout)."""

from .repository import PreferenceRepository

__all__ = ["PreferenceRepository"]
