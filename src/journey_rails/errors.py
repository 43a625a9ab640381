"""Typed failures raised by plan composition, traversal and skip handling."""

from __future__ import annotations


class JourneyRailsError(Exception):
    """Base class for every error raised by the journey engine."""


class GraphIntegrityError(JourneyRailsError, ValueError):
    """Plan authoring fault: unknown waypoint, malformed id or late mutation."""


class DuplicateOriginError(JourneyRailsError, ValueError):
    """Raised when two origins share a name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"origin '{name}' is already registered")


class UnknownOriginError(JourneyRailsError, KeyError):
    """Raised when a lookup names an origin the plan does not define."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"unknown origin '{self.name}'"


class DeadEndError(JourneyRailsError, RuntimeError):
    """No out-edge guard passed for a waypoint that has out-edges."""

    def __init__(self, waypoint_id: str) -> None:
        self.waypoint_id = waypoint_id
        super().__init__(f"no satisfiable out-edge from waypoint '{waypoint_id}'")


class InvalidWaypointIdError(JourneyRailsError, ValueError):
    """A requested waypoint id does not match the waypoint slug pattern."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"invalid waypoint id {value!r}")


class ContextFormatError(JourneyRailsError, ValueError):
    """A persisted journey context blob could not be decoded."""
