"""Triage session implementation.

The session is the single application context: it owns the ingestion
pipeline (and therefore the working set), the current filter criteria, the
presentation preferences and the last user-visible error. User actions reach
the core through an explicit dispatch table.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol

import structlog
from pydantic import ValidationError

from inbox_triage.config import Settings
from inbox_triage.exceptions import FetchError, InvalidFilterError, UnknownActionError
from inbox_triage.ingestion.pipeline import IngestionPipeline, MessageSource, WorkingSet
from inbox_triage.models import EmailRecord, FilterCriteria, Layout, Theme, UserProfile
from inbox_triage.preferences import PreferenceRepository
from inbox_triage.view.engine import InboxStats, aggregate, filter_records, find_record

logger = structlog.get_logger()

LOAD_FAILED_MESSAGE = "Failed to load emails. Please try again."


class AuthProvider(Protocol):
    """Sign-in collaborator. Implemented by ``GmailClient``."""

    def is_authenticated(self) -> bool: ...

    async def sign_in(self) -> None: ...

    async def sign_out(self) -> None: ...

    async def get_profile(self) -> UserProfile: ...


class MailAccount(AuthProvider, MessageSource, Protocol):
    """A collaborator that both signs in and serves messages."""


class TriageSession:
    """Application context tying auth, ingestion, filtering and preferences together."""

    def __init__(
        self,
        account: MailAccount,
        preferences: PreferenceRepository | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            account: Auth and transport collaborator (usually a GmailClient).
            preferences: Persisted theme/layout store. If None, preferences
                live only for the lifetime of the session.
            settings: Application settings. If None, uses default settings.
        """
        from inbox_triage.config import get_settings

        self.settings = settings or get_settings()
        self.account = account
        self.pipeline = IngestionPipeline(account, self.settings)
        self.preferences = preferences

        self.criteria = FilterCriteria(max_age_days=self.settings.default_max_age_days)
        self.theme = preferences.get_theme() if preferences else Theme.LIGHT
        self.layout = preferences.get_layout() if preferences else Layout.LIST
        self.profile: UserProfile | None = None
        self.selected_id: str | None = None
        self.last_error: str | None = None

        self._actions: dict[str, Callable[..., Any]] = {
            "sign_in": self.sign_in,
            "sign_out": self.sign_out,
            "refresh": self.refresh,
            "set_filter": self.set_filter,
            "select": self.select,
            "set_layout": self.set_layout,
            "toggle_theme": self.toggle_theme,
        }
        logger.info("triage_session_initialized", theme=self.theme.value, layout=self.layout.value)

    @property
    def actions(self) -> tuple[str, ...]:
        return tuple(self._actions)

    @property
    def records(self) -> WorkingSet:
        return self.pipeline.records

    async def dispatch(self, action: str, **kwargs: Any) -> Any:
        """Run the core operation bound to a user action.

        Raises:
            UnknownActionError: If ``action`` is not in the dispatch table.
        """

        handler = self._actions.get(action)
        if handler is None:
            raise UnknownActionError(f"Unknown action: {action}")

        logger.debug("session_action_dispatched", action=action)
        result = handler(**kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def sign_in(self) -> bool:
        await self.account.sign_in()
        try:
            self.profile = await self.account.get_profile()
        except FetchError as exc:
            logger.warning("user_profile_unavailable", error=str(exc))
            self.profile = UserProfile()
        return await self.refresh()

    async def sign_out(self) -> None:
        await self.account.sign_out()
        self.pipeline.clear()
        self.profile = None
        self.selected_id = None
        self.last_error = None

    async def refresh(self) -> bool:
        """Fetch the inbox again.

        Returns:
            True when the working set was replaced, False when the session is
            signed out or the fetch failed (see ``last_error``).
        """

        self.last_error = None
        try:
            records = await self.pipeline.ingest()
        except FetchError as exc:
            logger.error("inbox_refresh_failed", error=str(exc))
            self.last_error = LOAD_FAILED_MESSAGE
            return False
        return records is not None

    def set_filter(self, **changes: Any) -> FilterCriteria:
        try:
            self.criteria = FilterCriteria(**{**self.criteria.model_dump(), **changes})
        except ValidationError as exc:
            raise InvalidFilterError(str(exc)) from exc
        return self.criteria

    def view(self, now: datetime | None = None) -> list[EmailRecord]:
        return filter_records(self.records, self.criteria, now=now)

    def stats(self) -> InboxStats:
        return aggregate(self.records)

    def select(self, record_id: str, now: datetime | None = None) -> EmailRecord | None:
        """Pick a record from the current view for the detail display."""

        record = find_record(self.view(now), record_id)
        self.selected_id = record.id if record else None
        return record

    def set_layout(self, layout: Layout | str) -> Layout:
        self.layout = Layout(layout)
        if self.preferences:
            self.preferences.set_layout(self.layout)
        return self.layout

    def toggle_theme(self) -> Theme:
        self.theme = Theme.DARK if self.theme is Theme.LIGHT else Theme.LIGHT
        if self.preferences:
            self.preferences.set_theme(self.theme)
        return self.theme
