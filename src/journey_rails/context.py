"""Per-journey mutable state: submitted data, validation errors, visit history."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ContextFormatError
from .guards import GuardContext, SkippedFieldPolicy
from .types import FieldError
from .utils import carries_skip_marker, is_skip_marker, skip_marker


class _StrictBlobModel(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)


class FieldErrorBlob(_StrictBlobModel):
    field: str
    message: str
    validator: str = ""
    variables: dict[str, Any] = {}


class ContextBlob(_StrictBlobModel):
    """Shape of a persisted journey context."""

    data: dict[str, dict[str, Any]] = {}
    validation_errors: dict[str, list[FieldErrorBlob]] = {}
    history: list[str] = []


@dataclass
class JourneyContext:
    """Data and validation state for one user's journey.

    A waypoint is visited once it has a data entry. The skip marker is stored
    on its own: skipping replaces everything held for the waypoint, and
    submitting real data over a skipped waypoint starts from an empty payload.
    """

    data: dict[str, dict[str, Any]] = field(default_factory=dict)
    validation_errors: dict[str, list[FieldError]] = field(default_factory=dict)
    history: list[str] = field(default_factory=list)

    def set_data_for_waypoint(self, waypoint_id: str, payload: Mapping[str, Any]) -> None:
        if carries_skip_marker(payload):
            self.data[waypoint_id] = skip_marker()
            self.validation_errors.pop(waypoint_id, None)
        else:
            existing = self.data.get(waypoint_id, {})
            merged = {} if is_skip_marker(existing) else dict(existing)
            merged.update(copy.deepcopy(dict(payload)))
            self.data[waypoint_id] = merged

        if waypoint_id not in self.history:
            self.history.append(waypoint_id)

    def get_data_for_waypoint(self, waypoint_id: str) -> dict[str, Any]:
        return copy.deepcopy(self.data.get(waypoint_id, {}))

    def set_validation_errors(self, waypoint_id: str, errors: Iterable[FieldError]) -> None:
        errors = list(errors)
        if errors:
            self.validation_errors[waypoint_id] = errors
        else:
            self.clear_validation_errors(waypoint_id)

    def clear_validation_errors(self, waypoint_id: str) -> None:
        self.validation_errors.pop(waypoint_id, None)

    def get_validation_errors(self, waypoint_id: str) -> list[FieldError]:
        return list(self.validation_errors.get(waypoint_id, []))

    def is_skipped(self, waypoint_id: str) -> bool:
        return is_skip_marker(self.data.get(waypoint_id))

    def is_visited(self, waypoint_id: str) -> bool:
        return waypoint_id in self.data

    def is_complete(self, waypoint_id: str) -> bool:
        """Visited and free of validation errors."""

        return self.is_visited(waypoint_id) and not self.validation_errors.get(waypoint_id)

    def remove_waypoint(self, waypoint_id: str) -> None:
        self.data.pop(waypoint_id, None)
        self.validation_errors.pop(waypoint_id, None)
        if waypoint_id in self.history:
            self.history.remove(waypoint_id)

    def guard_view(self, skipped_fields: SkippedFieldPolicy = "absent") -> GuardContext:
        """Snapshot for guard evaluation; waypoints with errors are hidden."""

        valid = {
            waypoint_id: copy.deepcopy(payload)
            for waypoint_id, payload in self.data.items()
            if not self.validation_errors.get(waypoint_id)
        }
        return GuardContext(
            data=valid,
            validation_errors={
                waypoint_id: tuple(errors) for waypoint_id, errors in self.validation_errors.items()
            },
            skipped=frozenset(waypoint_id for waypoint_id in valid if is_skip_marker(valid[waypoint_id])),
            skipped_fields=skipped_fields,
        )

    def serialize(self) -> dict[str, Any]:
        """Persistence-neutral blob that ``deserialize`` accepts verbatim."""

        return {
            "data": copy.deepcopy(self.data),
            "validation_errors": {
                waypoint_id: [error.to_dict() for error in errors]
                for waypoint_id, errors in self.validation_errors.items()
            },
            "history": list(self.history),
        }

    @classmethod
    def deserialize(cls, blob: Mapping[str, Any] | None) -> "JourneyContext":
        if blob is None:
            return cls()
        try:
            parsed = ContextBlob.model_validate(dict(blob))
        except ValidationError as exc:
            raise ContextFormatError(f"malformed journey context: {exc}") from exc

        history = list(dict.fromkeys(parsed.history))
        for waypoint_id in parsed.data:
            if waypoint_id not in history:
                history.append(waypoint_id)

        return cls(
            data=copy.deepcopy(parsed.data),
            validation_errors={
                waypoint_id: [FieldError.from_dict(error.model_dump()) for error in errors]
                for waypoint_id, errors in parsed.validation_errors.items()
                if errors
            },
            history=[waypoint_id for waypoint_id in history if waypoint_id in parsed.data],
        )
