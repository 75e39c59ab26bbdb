"""Lenient parsing helpers shared by the converters."""

from __future__ import annotations

import json
import re
from typing import Any, NamedTuple

_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]*)*);base64,(?P<data>.*)$",
    re.DOTALL,
)


def try_parse_json(text: Any) -> Any | None:
    """Parse *text* as JSON, returning ``None`` instead of raising.

    ``None`` means "use the raw value". Tool-call arguments go through here.
    """
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return None


class DataUri(NamedTuple):
    mime_type: str | None
    data: str


def parse_data_uri(url: str | None) -> DataUri | None:
    """Split a ``data:<mime>;base64,<data>`` URI into mime type and payload.

    Returns ``None`` for anything that is not a base64 data URI. An empty
    mime segment yields ``mime_type=None``.
    """
    if not url:
        return None
    match = _DATA_URI_RE.match(url)
    if match is None:
        return None
    return DataUri(match.group("mime") or None, match.group("data"))
