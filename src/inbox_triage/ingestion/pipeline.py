"""Inbox ingestion pipeline.

Lists the newest inbox messages, fetches their full payloads with bounded
concurrency and swaps the working set for freshly built records. The batch is
all-or-nothing: one failed fetch aborts it and the previous working set stays
in place.
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol, runtime_checkable

import structlog

from inbox_triage.config import Settings
from inbox_triage.exceptions import FetchError, IngestionInProgressError
from inbox_triage.gmail.parsing import message_to_email_record
from inbox_triage.models import EmailRecord

logger = structlog.get_logger()

WorkingSet = tuple[EmailRecord, ...]


@runtime_checkable
class MessageSource(Protocol):
    """Transport used by the pipeline. Implemented by ``GmailClient``."""

    def is_authenticated(self) -> bool: ...

    async def list_inbox_message_ids(self, limit: int) -> list[dict[str, Any]]: ...

    async def get_message(self, message_id: str, *, format: str = "full") -> dict[str, Any]: ...


class IngestionPipeline:
    """Fetches the inbox and owns the resulting working set."""

    def __init__(self, source: MessageSource, settings: Settings | None = None) -> None:
        """Create a pipeline.

        Args:
            source: Authenticated message transport.
            settings: Application settings. If None, uses default settings.
        """
        from inbox_triage.config import get_settings

        self.settings = settings or get_settings()
        self._source = source
        self._records: WorkingSet = ()
        self._running = False

    @property
    def records(self) -> WorkingSet:
        return self._records

    @property
    def is_running(self) -> bool:
        return self._running

    def clear(self) -> None:
        self._records = ()
        logger.info("working_set_cleared")

    async def ingest(self) -> WorkingSet | None:
        """Replace the working set with the current inbox.

        Returns:
            The new working set, or None when the source is not authenticated.

        Raises:
            FetchError: If listing or any message fetch fails. The working set
                is left unchanged.
            IngestionInProgressError: If another ingestion is still running.
        """

        if not self._source.is_authenticated():
            logger.info("ingestion_skipped_not_authenticated")
            return None

        if self._running:
            raise IngestionInProgressError("An inbox fetch is already in progress")

        self._running = True
        try:
            message_ids = await self._list_ids()
            logger.info("ingestion_started", message_count=len(message_ids))

            messages = await self._fetch_all(message_ids)
            records = tuple(message_to_email_record(m) for m in messages)
        finally:
            self._running = False

        self._records = records
        logger.info("ingestion_completed", record_count=len(records))
        return records

    async def _list_ids(self) -> list[str]:
        try:
            listed = await self._source.list_inbox_message_ids(self.settings.list_limit)
        except FetchError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("ingestion_list_failed", error=str(exc))
            raise FetchError(str(exc)) from exc

        ids = [m.get("id") for m in listed or [] if isinstance(m, dict)]
        return [i for i in ids if isinstance(i, str) and i][: self.settings.fetch_limit]

    async def _fetch_all(self, message_ids: list[str]) -> list[dict[str, Any]]:
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)

        async def fetch(message_id: str) -> dict[str, Any]:
            async with semaphore:
                return await self._source.get_message(message_id, format="full")

        tasks = [asyncio.create_task(fetch(message_id)) for message_id in message_ids]
        try:
            return list(await asyncio.gather(*tasks))
        except Exception as exc:  # noqa: BLE001
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.error("ingestion_batch_aborted", message_count=len(message_ids), error=str(exc))
            if isinstance(exc, FetchError):
                raise
            raise FetchError(str(exc)) from exc
