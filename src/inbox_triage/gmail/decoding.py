"""Decoding of Gmail message payloads (format=full).

Headers are looked up case-insensitively and the plain-text body is assembled
from the payload tree. Undecodable parts are skipped rather than failing the
whole message.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Callable
from typing import Any

import structlog

from inbox_triage.exceptions import DecodeError

logger = structlog.get_logger()

PLAIN_TEXT = "text/plain"

# Provider payloads are shallow; anything deeper is treated as malformed.
MAX_PART_DEPTH = 32


def get_header(headers: Any, name: str) -> str:
    """Return the value of the first header called ``name`` (any case), or ``""``."""

    if not isinstance(headers, list):
        return ""

    wanted = name.lower()
    for h in headers:
        if not isinstance(h, dict):
            continue
        header_name = h.get("name")
        if isinstance(header_name, str) and header_name.lower() == wanted:
            value = h.get("value")
            return value if isinstance(value, str) else ""
    return ""


def header_lookup(message: dict[str, Any]) -> Callable[[str], str]:
    """Build a header lookup function for a raw Gmail message."""

    payload = message.get("payload") or {}
    headers = payload.get("headers") if isinstance(payload, dict) else None

    def lookup(name: str) -> str:
        return get_header(headers, name)

    return lookup


def decode_part_data(data: str) -> str:
    """Decode Gmail's URL-safe base64 body data into text.

    Raises:
        DecodeError: If ``data`` is not valid base64.
    """

    if not isinstance(data, str):
        raise DecodeError(f"expected base64 text, got {type(data).__name__}")

    standard = data.replace("-", "+").replace("_", "/")
    standard += "=" * (-len(standard) % 4)
    try:
        raw = base64.b64decode(standard.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, ValueError) as exc:
        raise DecodeError(str(exc)) from exc
    return raw.decode("utf-8", errors="replace")


def _inline_data(part: dict[str, Any]) -> str | None:
    body = part.get("body") or {}
    if not isinstance(body, dict):
        return None
    data = body.get("data")
    return data or None


def _decode_or_skip(data: str, *, mime_type: str | None, depth: int) -> str:
    try:
        return decode_part_data(data)
    except DecodeError as exc:
        logger.debug("message_part_decode_skipped", mime_type=mime_type, depth=depth, error=str(exc))
        return ""


def _walk_parts(parts: Any, depth: int) -> list[str]:
    if not isinstance(parts, list):
        return []
    if depth > MAX_PART_DEPTH:
        logger.debug("message_part_depth_exceeded", depth=depth, max_depth=MAX_PART_DEPTH)
        return []

    texts: list[str] = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        mime_type = part.get("mimeType")
        data = _inline_data(part)
        if mime_type == PLAIN_TEXT and data:
            texts.append(_decode_or_skip(data, mime_type=mime_type, depth=depth))
        elif part.get("parts"):
            texts.extend(_walk_parts(part["parts"], depth + 1))
    return texts


def extract_body(payload: Any) -> str:
    """Extract the plain-text body of a message payload.

    Inline data on the payload itself wins. Otherwise every ``text/plain``
    part with inline data is decoded and concatenated, depth-first in listed
    order.

    Args:
        payload: The ``payload`` object of a Gmail message.

    Returns:
        The decoded body, or ``""`` when nothing usable is present.
    """

    if not isinstance(payload, dict):
        return ""

    data = _inline_data(payload)
    if data:
        return _decode_or_skip(data, mime_type=payload.get("mimeType"), depth=0)

    return "".join(_walk_parts(payload.get("parts"), depth=1))
