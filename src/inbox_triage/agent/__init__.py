"""Session context wiring user actions to the triage core."""

from .session import LOAD_FAILED_MESSAGE, TriageSession

__all__ = ["LOAD_FAILED_MESSAGE", "TriageSession"]
