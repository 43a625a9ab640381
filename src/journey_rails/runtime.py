"""Request-boundary runtime wiring plan, context, store and validators.

This is the layer a web framework's handlers call. It loads the context,
enforces the rails check before every view, submission or skip, persists
after each mutation, and turns engine results into ``StepOutcome`` values.

A failed save is logged and re-raised; no redirect is issued for a
mutation that was not persisted, skips included.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from .context import JourneyContext
from .errors import DeadEndError, InvalidWaypointIdError, UnknownOriginError
from .plan import Plan
from .skip import skip as skip_waypoint
from .stores import ContextStore
from .traversal import furthest_waypoint, is_reachable, resolve_next, resolve_previous
from .types import NavigationEvent, StepOutcome
from .utils import is_waypoint_id, join_path
from .validation import FieldSpec, prune_payload, validate

logger = logging.getLogger(__name__)


@dataclass
class JourneyRuntime:
    """Journey request handling backed by a frozen plan."""

    plan: Plan
    store: ContextStore
    fields: Mapping[str, Sequence[FieldSpec]] = field(default_factory=dict)
    mount_url: str = "/"
    events: list[NavigationEvent] = field(default_factory=list)

    def load_context(self, session_id: str) -> JourneyContext:
        return JourneyContext.deserialize(self.store.load(session_id))

    def url_for(self, outcome: StepOutcome) -> str | None:
        if outcome.waypoint_id is None:
            return None
        return join_path(self.mount_url, outcome.origin_id, outcome.waypoint_id)

    def view(self, session_id: str, origin_id: str, waypoint_id: str) -> StepOutcome:
        context = self.load_context(session_id)
        blocked = self._check_rails(context, origin_id, waypoint_id)
        if blocked is not None:
            return blocked
        return StepOutcome(
            "render",
            origin_id,
            waypoint_id,
            errors=tuple(context.get_validation_errors(waypoint_id)),
        )

    def submit(
        self,
        session_id: str,
        origin_id: str,
        waypoint_id: str,
        payload: Mapping[str, Any],
    ) -> StepOutcome:
        context = self.load_context(session_id)
        blocked = self._check_rails(context, origin_id, waypoint_id)
        if blocked is not None:
            return blocked

        specs = self.fields.get(waypoint_id, ())
        gathered = prune_payload(specs, payload)
        result = validate(waypoint_id, specs, gathered)

        context.set_data_for_waypoint(waypoint_id, gathered)
        if not result.ok:
            context.set_validation_errors(waypoint_id, result.errors)
            self._persist(session_id, context)
            return StepOutcome("invalid", origin_id, waypoint_id, errors=result.errors)

        context.clear_validation_errors(waypoint_id)
        self._persist(session_id, context)
        return self._advance(context, origin_id, waypoint_id)

    def skip(self, session_id: str, origin_id: str, waypoint_id: str, skipto: object) -> StepOutcome:
        context = self.load_context(session_id)
        blocked = self._check_rails(context, origin_id, waypoint_id)
        if blocked is not None:
            return blocked

        try:
            instruction = skip_waypoint(context, waypoint_id, skipto, origin_id)  # type: ignore[arg-type]
        except InvalidWaypointIdError:
            logger.info("Rejected skip from %s: invalid target %r", waypoint_id, skipto)
            return StepOutcome("bad_request", origin_id, waypoint_id)

        logger.info("Marking waypoint %s as skipped", waypoint_id)
        self._persist(session_id, context)
        self.events.append(
            NavigationEvent(origin_id, waypoint_id, instruction.target_waypoint_id, reason="skip")
        )
        return StepOutcome("redirect", origin_id, instruction.target_waypoint_id)

    def back(self, session_id: str, origin_id: str, waypoint_id: str) -> StepOutcome:
        context = self.load_context(session_id)
        try:
            origin = self.plan.origin(origin_id)
        except UnknownOriginError:
            return StepOutcome("bad_request", origin_id, None)

        previous = resolve_previous(self.plan, context, origin, waypoint_id)
        target = previous if previous is not None else origin.entry
        self.events.append(NavigationEvent(origin_id, waypoint_id, target, reason="back"))
        return StepOutcome("redirect", origin_id, target)

    def _check_rails(self, context: JourneyContext, origin_id: str, waypoint_id: str) -> StepOutcome | None:
        if not is_waypoint_id(waypoint_id) or not self.plan.waypoint_exists(waypoint_id):
            return StepOutcome("bad_request", origin_id, None)
        try:
            origin = self.plan.origin(origin_id)
        except UnknownOriginError:
            return StepOutcome("bad_request", origin_id, None)

        if is_reachable(self.plan, context, origin, waypoint_id):
            return None

        furthest = furthest_waypoint(self.plan, context, origin)
        if furthest is None:
            logger.info("Origin %s is not enterable for this journey", origin_id)
            return StepOutcome("bad_request", origin_id, None)
        logger.info(
            "Waypoint %s is not reachable in origin %s; redirecting to %s",
            waypoint_id,
            origin_id,
            furthest,
        )
        self.events.append(NavigationEvent(origin_id, waypoint_id, furthest, reason="rails"))
        return StepOutcome("redirect", origin_id, furthest)

    def _advance(self, context: JourneyContext, origin_id: str, waypoint_id: str) -> StepOutcome:
        try:
            target = resolve_next(self.plan, context, waypoint_id)
        except DeadEndError as exc:
            logger.error("Journey dead end at waypoint %s (origin %s)", exc.waypoint_id, origin_id)
            raise

        self.events.append(NavigationEvent(origin_id, waypoint_id, target, reason="submit"))
        if target is None:
            return StepOutcome("complete", origin_id, waypoint_id)
        return StepOutcome("redirect", origin_id, target)

    def _persist(self, session_id: str, context: JourneyContext) -> None:
        try:
            self.store.save(session_id, context.serialize())
        except Exception:
            logger.exception("Failed to save journey context for session %s", session_id)
            raise
