"""Field validator pipeline for a single waypoint's submitted payload."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from .types import FieldError, ValidationResult

Check = Callable[[Any, Mapping[str, Any]], bool]
Condition = Callable[[Mapping[str, Any]], bool]


@dataclass(frozen=True)
class FieldValidator:
    """Named check over a field value and the whole payload."""

    name: str
    check: Check = field(compare=False)
    message: str = "validation:rule.invalid"
    variables: Mapping[str, Any] = field(default_factory=dict)

    def run(self, field_name: str, value: Any, payload: Mapping[str, Any]) -> FieldError | None:
        if self.check(value, payload):
            return None
        return FieldError(
            field=field_name,
            message=self.message,
            validator=self.name,
            variables=dict(self.variables),
        )


@dataclass(frozen=True)
class FieldSpec:
    """Validators for one field, run in order, plus an optional condition."""

    name: str
    validators: tuple[FieldValidator, ...] = ()
    condition: Condition | None = field(default=None, compare=False)

    def applies_to(self, payload: Mapping[str, Any]) -> bool:
        return self.condition is None or bool(self.condition(payload))


def validate(
    waypoint_id: str,
    field_specs: Sequence[FieldSpec],
    payload: Mapping[str, Any],
) -> ValidationResult:
    """Run every field's validators; a field stops at its first failure."""

    errors: list[FieldError] = []
    for spec in field_specs:
        if not spec.applies_to(payload):
            continue
        value = payload.get(spec.name)
        for validator in spec.validators:
            error = validator.run(spec.name, value, payload)
            if error is not None:
                errors.append(error)
                break
    return ValidationResult(waypoint_id=waypoint_id, errors=tuple(errors))


def prune_payload(field_specs: Sequence[FieldSpec], payload: Mapping[str, Any]) -> dict[str, Any]:
    """Drop submitted keys that no field spec declares."""

    declared = {spec.name for spec in field_specs}
    return {key: value for key, value in payload.items() if key in declared}
