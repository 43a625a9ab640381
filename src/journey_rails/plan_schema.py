"""Strict schema definitions for declarative journey plan configuration."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

WAYPOINT_ID_PATTERN = r"^[a-z0-9-]{1,200}$"

WaypointId = Annotated[str, Field(pattern=WAYPOINT_ID_PATTERN)]


class StrictBaseModel(BaseModel):
    """Base model with strict validation and no unknown keys."""

    model_config = ConfigDict(extra="forbid", strict=True)


class MetaConfig(StrictBaseModel):
    plan_id: str
    plan_version: str
    description: str = ""


class SettingsConfig(StrictBaseModel):
    mount_url: str = "/"
    skipped_fields: Literal["absent", "inapplicable"] = "absent"


class AlwaysGuardConfig(StrictBaseModel):
    kind: Literal["always"] = "always"


class FieldGuardConfig(StrictBaseModel):
    kind: Literal["field"]
    waypoint: WaypointId
    field: str
    op: Literal["eq", "ne", "gt", "ge", "lt", "le", "in", "not_in", "truthy", "falsy"]
    value: Any = None

    @model_validator(mode="after")
    def validate_operand(self) -> "FieldGuardConfig":
        if self.op in ("in", "not_in") and not isinstance(self.value, list):
            raise ValueError(f"'{self.op}' comparisons need a list value")
        return self


class VisitedGuardConfig(StrictBaseModel):
    kind: Literal["visited"]
    waypoints: list[WaypointId] = Field(min_length=1)


class SkippedGuardConfig(StrictBaseModel):
    kind: Literal["skipped"]
    waypoint: WaypointId
    negate: bool = False


class FlagGuardConfig(StrictBaseModel):
    kind: Literal["flag"]
    name: str
    enabled: bool


GuardConfig = Annotated[
    Union[AlwaysGuardConfig, FieldGuardConfig, VisitedGuardConfig, SkippedGuardConfig, FlagGuardConfig],
    Field(discriminator="kind"),
]


class EdgeConfig(StrictBaseModel):
    source: WaypointId
    target: WaypointId
    guard: GuardConfig = Field(default_factory=AlwaysGuardConfig)
    order: int | None = None


class OriginConfig(StrictBaseModel):
    name: WaypointId
    entry: WaypointId
    guard: GuardConfig = Field(default_factory=AlwaysGuardConfig)


class PlanConfig(StrictBaseModel):
    meta: MetaConfig
    settings: SettingsConfig = Field(default_factory=SettingsConfig)
    waypoints: list[WaypointId] = Field(min_length=1)
    sequences: list[list[WaypointId]] = Field(default_factory=list)
    edges: list[EdgeConfig] = Field(default_factory=list)
    origins: list[OriginConfig] = Field(min_length=1)

    @model_validator(mode="after")
    def validate_unique_waypoints(self) -> "PlanConfig":
        if len(self.waypoints) != len(set(self.waypoints)):
            duplicates = sorted({item for item in self.waypoints if self.waypoints.count(item) > 1})
            raise ValueError(f"waypoints must be unique, duplicated: {duplicates}")
        for sequence in self.sequences:
            if len(sequence) < 2:
                raise ValueError("sequences need at least two waypoints")
        return self


def validate_config_dict(config: dict) -> PlanConfig:
    """Convenience helper that raises a detailed validation error on failure."""

    try:
        return PlanConfig.model_validate(config)
    except ValidationError as exc:
        raise exc
