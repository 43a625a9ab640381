"""Guard predicates for edges and origins.

A guard is a plain value: a ``kind`` tag, a predicate over a read-only
``GuardContext`` snapshot, and a human readable description. Plans built from
YAML and plans built in code use the same constructors below, so a guard can
be unit tested on its own by handing it a hand-made snapshot.

Kinds:

- ``always``: passes unconditionally.
- ``data``: depends on submitted data. When the source waypoint of an edge
  was skipped, data guards on its out-edges pass without being evaluated.
- ``skip``: inspects skip markers; always evaluated.
- ``origin``: entry gates (visited prerequisites, feature flags).
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Mapping

from .types import FieldError

GuardKind = Literal["always", "data", "skip", "origin"]
SkippedFieldPolicy = Literal["absent", "inapplicable"]
CompareOp = Literal["eq", "ne", "gt", "ge", "lt", "le", "in", "not_in", "truthy", "falsy"]

_MISSING = object()

_BINARY_OPS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": operator.eq,
    "ne": operator.ne,
    "gt": operator.gt,
    "ge": operator.ge,
    "lt": operator.lt,
    "le": operator.le,
    "in": lambda left, right: left in right,
    "not_in": lambda left, right: left not in right,
}


@dataclass(frozen=True)
class GuardContext:
    """Immutable view of a journey context used for guard evaluation.

    ``data`` only holds waypoints without validation errors; a waypoint that
    failed validation is invisible to guards.
    """

    data: Mapping[str, Mapping[str, Any]]
    validation_errors: Mapping[str, tuple[FieldError, ...]] = field(default_factory=dict)
    skipped: frozenset[str] = frozenset()
    source: str | None = None
    skipped_fields: SkippedFieldPolicy = "absent"

    def is_skipped(self, waypoint_id: str) -> bool:
        return waypoint_id in self.skipped

    def visited(self, waypoint_id: str) -> bool:
        return waypoint_id in self.data

    def get(self, waypoint_id: str, name: str, default: Any = None) -> Any:
        if waypoint_id in self.skipped:
            return default
        return self.data.get(waypoint_id, {}).get(name, default)

    def for_source(self, source: str) -> "GuardContext":
        return GuardContext(
            data=self.data,
            validation_errors=self.validation_errors,
            skipped=self.skipped,
            source=source,
            skipped_fields=self.skipped_fields,
        )


Predicate = Callable[[GuardContext], bool]


@dataclass(frozen=True)
class Guard:
    kind: GuardKind
    predicate: Predicate = field(compare=False)
    description: str = ""

    def __call__(self, ctx: GuardContext) -> bool:
        return bool(self.predicate(ctx))

    @property
    def data_dependent(self) -> bool:
        return self.kind == "data"


def always() -> Guard:
    return Guard("always", lambda ctx: True, "always")


def when(predicate: Predicate, description: str = "custom") -> Guard:
    """Wrap an arbitrary data predicate."""

    return Guard("data", predicate, description)


def field_guard(waypoint_id: str, name: str, op: CompareOp, value: Any = None) -> Guard:
    """Compare a submitted field against a constant.

    A missing field, or a comparison between incompatible types, fails. A
    field on a skipped waypoint follows the context's skipped-field policy.
    """

    if op not in _BINARY_OPS and op not in ("truthy", "falsy"):
        raise ValueError(f"unsupported comparison '{op}'")

    def predicate(ctx: GuardContext) -> bool:
        if ctx.is_skipped(waypoint_id):
            return ctx.skipped_fields == "inapplicable"
        current = ctx.get(waypoint_id, name, _MISSING)
        if current is _MISSING:
            return False
        if op == "truthy":
            return bool(current)
        if op == "falsy":
            return not current
        try:
            return bool(_BINARY_OPS[op](current, value))
        except TypeError:
            return False

    return Guard("data", predicate, f"{waypoint_id}.{name} {op} {value!r}")


def visited(*waypoint_ids: str) -> Guard:
    """Pass once every listed waypoint holds data without validation errors."""

    required = tuple(waypoint_ids)
    return Guard(
        "origin",
        lambda ctx: all(ctx.visited(waypoint_id) for waypoint_id in required),
        f"visited {', '.join(required)}",
    )


def skipped(waypoint_id: str, negate: bool = False) -> Guard:
    """Pass when ``waypoint_id`` was skipped (or was not, with ``negate``)."""

    def predicate(ctx: GuardContext) -> bool:
        return ctx.is_skipped(waypoint_id) != negate

    label = "not skipped" if negate else "skipped"
    return Guard("skip", predicate, f"{waypoint_id} {label}")


def flag(enabled: bool, name: str = "flag") -> Guard:
    """Constant gate, used for feature-flagged origins."""

    return Guard("origin", lambda ctx: enabled, f"{name}={'on' if enabled else 'off'}")
