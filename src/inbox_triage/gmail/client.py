"""Gmail API client implementation.

This module provides the concrete auth and transport collaborator used by the
ingestion pipeline.

Notes:
    The Google API client is synchronous. This project wraps those calls using
    `asyncio.to_thread` so the rest of the codebase can remain async-friendly.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import structlog

from inbox_triage.config import Settings
from inbox_triage.exceptions import AuthenticationError, ConfigurationError, GmailAPIError
from inbox_triage.models import UserProfile
from inbox_triage.utils import retry_on_failure

logger = structlog.get_logger()

# Statuses retried by _execute; other HTTP errors fail on the first attempt.
TRANSIENT_HTTP_STATUSES = frozenset({429, 500, 502, 503, 504})


def is_transient_error(exc: BaseException) -> bool:
    """Return True for request failures worth retrying."""

    from googleapiclient.errors import HttpError

    if isinstance(exc, HttpError):
        status = getattr(getattr(exc, "resp", None), "status", None)
        return status in TRANSIENT_HTTP_STATUSES
    return isinstance(exc, (OSError, TimeoutError))


class GmailClient:
    """Gmail API client for inbox triage.

    This client handles authentication, the signed-in user's profile,
    inbox listing and full message retrieval.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize Gmail client.

        Args:
            settings: Application settings. If None, uses default settings.
        """
        from inbox_triage.config import get_settings

        self.settings = settings or get_settings()
        self._service: Any | None = None
        self._credentials: Any | None = None
        logger.info("gmail_client_initialized")

    def is_authenticated(self) -> bool:
        return self._service is not None

    async def sign_in(self) -> None:
        """Authenticate with Gmail API using OAuth2.

        A cached token is reused (and refreshed) when available; otherwise the
        interactive browser flow runs and the token is cached.

        Raises:
            ConfigurationError: If the OAuth client secrets file is missing.
            AuthenticationError: If authentication fails.
        """

        if self._service is not None:
            return

        credentials_path = Path(self.settings.gmail_credentials_path)
        token_path = Path(self.settings.gmail_token_path)
        scopes = list(self.settings.gmail_scopes)

        if not credentials_path.exists() and not token_path.exists():
            raise ConfigurationError(
                f"Gmail credentials file not found: {credentials_path}. "
                "Download an OAuth client secrets file from the Google Cloud console."
            )

        logger.info(
            "gmail_authentication_started",
            credentials_path=str(credentials_path),
            token_path=str(token_path),
            scopes=scopes,
        )

        try:
            self._credentials = await asyncio.to_thread(
                self._load_credentials,
                credentials_path,
                token_path,
                scopes,
            )
            self._service = await asyncio.to_thread(self._build, "gmail", "v1")
        except Exception as exc:  # noqa: BLE001
            self._credentials = None
            logger.exception("gmail_authentication_failed", error=str(exc))
            raise AuthenticationError(str(exc)) from exc

        logger.info("gmail_authentication_completed")

    async def sign_out(self) -> None:
        """Forget the current session and the cached token."""

        token_path = Path(self.settings.gmail_token_path)
        self._service = None
        self._credentials = None
        if token_path.exists():
            await asyncio.to_thread(token_path.unlink)
        logger.info("gmail_signed_out", token_path=str(token_path))

    async def get_profile(self) -> UserProfile:
        """Return the signed-in user's display name and avatar.

        Raises:
            AuthenticationError: If the client is not signed in.
            GmailAPIError: If the profile request fails.
        """

        await self._ensure_authenticated()

        try:
            info = await asyncio.to_thread(self._get_profile_sync)
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_get_profile_failed", error=str(exc))
            raise GmailAPIError(str(exc)) from exc

        return UserProfile(name=info.get("name") or "", avatar_url=info.get("picture"))

    async def list_inbox_message_ids(
        self,
        limit: int,
        query: str | None = None,
    ) -> list[dict[str, Any]]:
        """List inbox messages, newest first.

        Args:
            limit: Maximum number of message references to return.
            query: Gmail search query. Defaults to the configured inbox query.

        Returns:
            List of ``{"id": ..., "threadId": ...}`` dictionaries.

        Raises:
            GmailAPIError: If the API request fails.
        """

        await self._ensure_authenticated()

        resolved_query = query if query is not None else self.settings.inbox_query
        logger.info("listing_messages", max_results=limit, query=resolved_query)

        try:
            return await asyncio.to_thread(self._list_messages_sync, limit, resolved_query)
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_list_messages_failed", error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    async def get_message(
        self,
        message_id: str,
        *,
        format: str = "full",
    ) -> dict[str, Any]:
        """Get a specific message by ID.

        Args:
            message_id: The Gmail message ID.
            format: Gmail response format; ``full`` includes the payload tree.

        Returns:
            Message data dictionary.

        Raises:
            GmailAPIError: If the API request fails.
        """

        await self._ensure_authenticated()

        logger.debug("getting_message", message_id=message_id, format=format)

        try:
            return await asyncio.to_thread(self._get_message_sync, message_id, format)
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_get_message_failed", message_id=message_id, error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    async def _ensure_authenticated(self) -> None:
        if self._service is None:
            raise AuthenticationError(
                "Gmail client is not authenticated. Call await GmailClient.sign_in() first."
            )

    def _load_credentials(self, credentials_path: Path, token_path: Path, scopes: list[str]) -> Any:
        # Imported lazily to keep import-time cost low and tests fast.
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials
        from google_auth_oauthlib.flow import InstalledAppFlow

        creds: Credentials | None = None
        if token_path.exists():
            creds = Credentials.from_authorized_user_file(str(token_path), scopes=scopes)

        if creds is not None and creds.expired and creds.refresh_token:
            creds.refresh(Request())

        if creds is None or not creds.valid:
            if not credentials_path.exists():
                raise ConfigurationError(f"Gmail credentials file not found: {credentials_path}")
            flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes=scopes)
            creds = flow.run_local_server(port=0)
            token_path.parent.mkdir(parents=True, exist_ok=True)
            token_path.write_text(creds.to_json(), encoding="utf-8")

        return creds

    def _build(self, api: str, version: str) -> Any:
        from googleapiclient.discovery import build

        # cache_discovery=False prevents writing discovery docs to disk.
        return build(api, version, credentials=self._credentials, cache_discovery=False)

    def _execute(self, request: Any) -> dict[str, Any]:
        execute = retry_on_failure(
            max_retries=self.settings.max_retries,
            delay=self.settings.retry_delay,
            retry_if=is_transient_error,
        )(request.execute)
        return execute()

    def _get_profile_sync(self) -> dict[str, Any]:
        oauth2 = self._build("oauth2", "v2")
        return self._execute(oauth2.userinfo().get())

    def _list_messages_sync(self, limit: int, query: str | None) -> list[dict[str, Any]]:
        assert self._service is not None
        request = (
            self._service.users()
            .messages()
            .list(userId="me", maxResults=limit, q=query)
        )
        response = self._execute(request)
        messages = response.get("messages", []) or []
        return messages[:limit]

    def _get_message_sync(self, message_id: str, format: str) -> dict[str, Any]:
        assert self._service is not None
        request = (
            self._service.users()
            .messages()
            .get(userId="me", id=message_id, format=format)
        )
        return self._execute(request)
