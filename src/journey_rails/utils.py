"""Waypoint id checks, skip marker helpers and path joining."""

from __future__ import annotations

import re
from typing import Any, Mapping

WAYPOINT_ID_RE = re.compile(r"^[a-z0-9-]{1,200}$")
MULTI_SLASH_RE = re.compile(r"/+")

SKIPPED_KEY = "__skipped__"


def is_waypoint_id(value: object) -> bool:
    """True when ``value`` is a string matching the waypoint slug pattern."""

    return isinstance(value, str) and WAYPOINT_ID_RE.fullmatch(value) is not None


def skip_marker() -> dict[str, Any]:
    """Fresh copy of the payload stored for a skipped waypoint."""

    return {SKIPPED_KEY: True}


def carries_skip_marker(payload: Mapping[str, Any]) -> bool:
    return payload.get(SKIPPED_KEY) is True


def is_skip_marker(payload: Mapping[str, Any] | None) -> bool:
    """True only for a payload that is exactly the skip marker."""

    return payload is not None and len(payload) == 1 and carries_skip_marker(payload)


def join_path(*parts: str) -> str:
    """Join URL path segments, collapsing repeated slashes."""

    joined = "/".join(part for part in parts if part)
    return MULTI_SLASH_RE.sub("/", f"/{joined}")
