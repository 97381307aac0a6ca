"""SQLite-backed store for presentation preferences.

Only small key/value preferences (theme, layout) live here. Fetched mail is
never written to disk.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

import structlog

from inbox_triage.models import Layout, Theme

logger = structlog.get_logger()


_SCHEMA_VERSION = 1

THEME_KEY = "theme"
LAYOUT_KEY = "layout"


class PreferenceRepository:
    """Repository for persisted key/value preferences."""

    def __init__(self, db_path: Path) -> None:
        """Create a repository.

        Args:
            db_path: Path to the SQLite database file.
        """

        self._db_path = db_path

    def initialize(self) -> None:
        """Create the preferences schema if needed."""

        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS _schema_meta (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
                """
            )

            current_version = self._get_schema_version(conn)
            if current_version is None:
                self._create_schema_v1(conn)
                self._set_schema_version(conn, _SCHEMA_VERSION)
                conn.commit()
                logger.info("preferences_schema_created", version=_SCHEMA_VERSION)
                return

            if current_version != _SCHEMA_VERSION:
                raise RuntimeError(
                    f"Unsupported schema version {current_version}; expected {_SCHEMA_VERSION}"
                )

    def get(self, key: str, default: str | None = None) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM preferences WHERE key = ?",
                (key,),
            ).fetchone()
        return default if row is None else row["value"]

    def set(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO preferences (key, value, updated_at_iso)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value=excluded.value,
                    updated_at_iso=excluded.updated_at_iso
                """,
                (key, value, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()

    def get_theme(self) -> Theme:
        value = self.get(THEME_KEY)
        try:
            return Theme(value) if value else Theme.LIGHT
        except ValueError:
            logger.warning("preference_value_ignored", key=THEME_KEY, value=value)
            return Theme.LIGHT

    def set_theme(self, theme: Theme) -> None:
        self.set(THEME_KEY, theme.value)

    def get_layout(self) -> Layout:
        value = self.get(LAYOUT_KEY)
        try:
            return Layout(value) if value else Layout.LIST
        except ValueError:
            logger.warning("preference_value_ignored", key=LAYOUT_KEY, value=value)
            return Layout.LIST

    def set_layout(self, layout: Layout) -> None:
        self.set(LAYOUT_KEY, layout.value)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._db_path)
        try:
            conn.row_factory = sqlite3.Row
            yield conn
        finally:
            conn.close()

    def _get_schema_version(self, conn: sqlite3.Connection) -> int | None:
        row = conn.execute(
            "SELECT value FROM _schema_meta WHERE key = 'schema_version'"
        ).fetchone()
        if row is None:
            return None
        return int(row[0])

    def _set_schema_version(self, conn: sqlite3.Connection, version: int) -> None:
        conn.execute(
            "INSERT OR REPLACE INTO _schema_meta(key, value) VALUES('schema_version', ?) ",
            (str(version),),
        )

    def _create_schema_v1(self, conn: sqlite3.Connection) -> None:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS preferences (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at_iso TEXT NOT NULL
            );
            """
        )
