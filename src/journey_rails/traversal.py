"""Next/previous resolution and reachability checks ("journey rails").

All functions are pure over explicit ``Plan`` and ``JourneyContext``
arguments. Reachability is evaluated by replaying the plan from an origin's
entry waypoint against the data currently held, so a user cannot jump to a
waypoint whose preconditions are not satisfied by fabricating its URL.
"""

from __future__ import annotations

from typing import Iterator

from .context import JourneyContext
from .errors import DeadEndError, GraphIntegrityError
from .plan import Origin, Plan


def _require_frozen(plan: Plan) -> None:
    if not plan.frozen:
        raise GraphIntegrityError("plan must be frozen before traversal")


def _resolve_origin(plan: Plan, origin: Origin | str) -> Origin:
    return plan.origin(origin) if isinstance(origin, str) else origin


def resolve_next(plan: Plan, context: JourneyContext, current: str) -> str | None:
    """Target of the first out-edge of ``current`` whose guard passes.

    Returns ``None`` for a terminal waypoint. Raises ``DeadEndError`` when
    out-edges exist but none can be taken.
    """

    _require_frozen(plan)
    edges = plan.out_edges(current)
    if not edges:
        return None

    source_skipped = context.is_skipped(current)
    ctx = context.guard_view(plan.skipped_fields).for_source(current)
    for edge in edges:
        if source_skipped and edge.guard.data_dependent:
            return edge.target
        if edge.guard(ctx):
            return edge.target

    raise DeadEndError(current)


def _walk(plan: Plan, context: JourneyContext, origin: Origin) -> Iterator[str]:
    _require_frozen(plan)
    if not origin.guard(context.guard_view(plan.skipped_fields)):
        return

    seen: set[str] = set()
    current: str | None = origin.entry
    while current is not None and current not in seen:
        yield current
        seen.add(current)
        if not context.is_complete(current):
            return
        current = resolve_next(plan, context, current)


def traverse(plan: Plan, context: JourneyContext, origin: Origin | str) -> list[str]:
    """Waypoints the user may currently visit, in journey order.

    The walk ends at the first waypoint still awaiting valid data, at a
    terminal waypoint, or when a loop revisits a waypoint.
    """

    return list(_walk(plan, context, _resolve_origin(plan, origin)))


def reachable_waypoints(plan: Plan, context: JourneyContext, origin: Origin | str) -> list[str]:
    """Like ``traverse`` but a dead end truncates the route instead of raising."""

    route: list[str] = []
    try:
        for waypoint_id in _walk(plan, context, _resolve_origin(plan, origin)):
            route.append(waypoint_id)
    except DeadEndError:
        pass
    return route


def is_reachable(plan: Plan, context: JourneyContext, origin: Origin | str, target: str) -> bool:
    if not plan.waypoint_exists(target):
        return False
    try:
        for waypoint_id in _walk(plan, context, _resolve_origin(plan, origin)):
            if waypoint_id == target:
                return True
    except DeadEndError:
        return False
    return False


def furthest_waypoint(plan: Plan, context: JourneyContext, origin: Origin | str) -> str | None:
    route = reachable_waypoints(plan, context, origin)
    return route[-1] if route else None


def resolve_previous(
    plan: Plan,
    context: JourneyContext,
    origin: Origin | str,
    current: str,
) -> str | None:
    """Most recent earlier waypoint in the visit history that is still reachable.

    History entries invalidated by later data edits are passed over.
    """

    history = context.history
    end = history.index(current) if current in history else len(history)
    reachable = set(reachable_waypoints(plan, context, origin))
    for waypoint_id in reversed(history[:end]):
        if waypoint_id != current and waypoint_id in reachable:
            return waypoint_id
    return None
