"""Data models for Inbox Triage.

This module contains Pydantic models for data validation and serialization.
"""

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from inbox_triage.models.email_record import NO_SUMMARY_PLACEHOLDER, UNKNOWN_DATE, EmailRecord
from inbox_triage.models.priority import Priority


class Visibility(str, Enum):
    """Read-state constraint of the email list."""

    ALL = "all"
    UNREAD = "unread"
    READ = "read"
    STARRED = "starred"


class Layout(str, Enum):
    """Presentation layout of the email list."""

    LIST = "list"
    CARD = "card"


class Theme(str, Enum):
    """Colour theme of the presentation layer."""

    LIGHT = "light"
    DARK = "dark"


ALL_PRIORITIES = "all"


class FilterCriteria(BaseModel):
    """User-selected constraints used to derive the visible email list."""

    model_config = ConfigDict(frozen=True)

    max_age_days: int = Field(default=7, ge=0, description="Age window in days")
    priority: Union[Priority, Literal["all"]] = Field(
        default=ALL_PRIORITIES,
        description="Priority tier to keep, or 'all'",
    )
    visibility: Visibility = Field(default=Visibility.ALL, description="Read-state constraint")


class UserProfile(BaseModel):
    """Basic profile of the signed-in user."""

    name: str = Field(default="", description="Display name")
    avatar_url: str | None = Field(default=None, description="Profile picture URL")


__all__ = [
    "ALL_PRIORITIES",
    "EmailRecord",
    "FilterCriteria",
    "Layout",
    "NO_SUMMARY_PLACEHOLDER",
    "Priority",
    "Theme",
    "UNKNOWN_DATE",
    "UserProfile",
    "Visibility",
]
