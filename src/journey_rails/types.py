"""Typed data contracts shared across the journey engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from .utils import join_path

OutcomeStatus = Literal["render", "redirect", "invalid", "bad_request", "complete"]


@dataclass(frozen=True)
class FieldError:
    """Single field-scoped validation failure."""

    field: str
    message: str
    validator: str = ""
    variables: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "message": self.message,
            "validator": self.validator,
            "variables": dict(self.variables),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldError":
        return cls(
            field=data["field"],
            message=data["message"],
            validator=data.get("validator", ""),
            variables=dict(data.get("variables", {})),
        )


@dataclass(frozen=True)
class ValidationResult:
    """Ordered errors produced by validating one waypoint's payload."""

    waypoint_id: str
    errors: tuple[FieldError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def by_field(self) -> dict[str, list[FieldError]]:
        grouped: dict[str, list[FieldError]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error)
        return grouped


@dataclass(frozen=True)
class SkipInstruction:
    """Result of a skip: persist the context, then redirect to the target."""

    waypoint_id: str
    target_waypoint_id: str
    origin_id: str = ""

    def redirect_path(self, mount_url: str = "/") -> str:
        return join_path(mount_url, self.origin_id, self.target_waypoint_id)


@dataclass(frozen=True)
class NavigationEvent:
    """Recorded navigation decision for auditability."""

    origin_id: str
    from_waypoint: str
    to_waypoint: str | None
    reason: str


@dataclass(frozen=True)
class StepOutcome:
    """What the routing layer should do after a request."""

    status: OutcomeStatus
    origin_id: str
    waypoint_id: str | None
    errors: tuple[FieldError, ...] = ()
