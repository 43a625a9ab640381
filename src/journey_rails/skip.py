"""Explicit bypass of a waypoint.

A skipped waypoint holds nothing but the skip marker. Waypoints leading up
to it must already be reachable, so callers run the rails check first.
"""

from __future__ import annotations

from .context import JourneyContext
from .errors import InvalidWaypointIdError
from .types import SkipInstruction
from .utils import is_waypoint_id, skip_marker


def skip(
    context: JourneyContext,
    waypoint_id: str,
    target_waypoint_id: str,
    origin_id: str = "",
) -> SkipInstruction:
    """Mark ``waypoint_id`` as skipped and return where to send the user next."""

    if not is_waypoint_id(target_waypoint_id):
        raise InvalidWaypointIdError(target_waypoint_id)

    context.clear_validation_errors(waypoint_id)
    context.set_data_for_waypoint(waypoint_id, skip_marker())
    return SkipInstruction(
        waypoint_id=waypoint_id,
        target_waypoint_id=target_waypoint_id,
        origin_id=origin_id,
    )
