"""Journey plan and traversal engine package."""

from .context import JourneyContext
from .errors import (
    ContextFormatError,
    DeadEndError,
    DuplicateOriginError,
    GraphIntegrityError,
    InvalidWaypointIdError,
    JourneyRailsError,
    UnknownOriginError,
)
from .plan import Edge, Origin, Plan
from .plan_loader import build_plan, load_plan, load_plan_config, merge_yaml_configs
from .plan_schema import PlanConfig
from .runtime import JourneyRuntime
from .skip import skip
from .traversal import (
    furthest_waypoint,
    is_reachable,
    reachable_waypoints,
    resolve_next,
    resolve_previous,
    traverse,
)
from .types import FieldError, SkipInstruction, StepOutcome, ValidationResult
from .validation import FieldSpec, FieldValidator, validate

__all__ = [
    "ContextFormatError",
    "DeadEndError",
    "DuplicateOriginError",
    "Edge",
    "FieldError",
    "FieldSpec",
    "FieldValidator",
    "GraphIntegrityError",
    "InvalidWaypointIdError",
    "JourneyContext",
    "JourneyRailsError",
    "JourneyRuntime",
    "Origin",
    "Plan",
    "PlanConfig",
    "SkipInstruction",
    "StepOutcome",
    "UnknownOriginError",
    "ValidationResult",
    "build_plan",
    "furthest_waypoint",
    "is_reachable",
    "load_plan",
    "load_plan_config",
    "merge_yaml_configs",
    "reachable_waypoints",
    "resolve_next",
    "resolve_previous",
    "skip",
    "traverse",
    "validate",
]
