"""OmegaConf merge, validated plan config loading and plan compilation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from omegaconf import DictConfig, OmegaConf

from . import guards
from .guards import Guard
from .plan import Plan
from .plan_schema import (
    AlwaysGuardConfig,
    FieldGuardConfig,
    FlagGuardConfig,
    GuardConfig,
    PlanConfig,
    SkippedGuardConfig,
    VisitedGuardConfig,
    validate_config_dict,
)

logger = logging.getLogger(__name__)


def _load_yaml(path: Path) -> DictConfig:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    return OmegaConf.load(path)


def merge_yaml_configs(base_path: Path | str, override_paths: Sequence[Path | str] | None = None) -> DictConfig:
    """Merge base config with optional override files, preserving order."""

    merged_stack: list[DictConfig] = [_load_yaml(Path(base_path))]
    for override_path in override_paths or []:
        merged_stack.append(_load_yaml(Path(override_path)))
    return OmegaConf.merge(*merged_stack)


def load_plan_config(
    base_path: Path | str,
    override_paths: Sequence[Path | str] | None = None,
) -> PlanConfig:
    """Load and validate plan configuration."""

    merged = merge_yaml_configs(base_path=base_path, override_paths=override_paths)
    resolved = OmegaConf.to_container(merged, resolve=True)
    if not isinstance(resolved, dict):
        raise TypeError("Resolved config is not a dictionary")
    return validate_config_dict(resolved)


def build_guard(config: GuardConfig) -> Guard:
    if isinstance(config, AlwaysGuardConfig):
        return guards.always()
    if isinstance(config, FieldGuardConfig):
        value = tuple(config.value) if config.op in ("in", "not_in") else config.value
        return guards.field_guard(config.waypoint, config.field, config.op, value)
    if isinstance(config, VisitedGuardConfig):
        return guards.visited(*config.waypoints)
    if isinstance(config, SkippedGuardConfig):
        return guards.skipped(config.waypoint, negate=config.negate)
    if isinstance(config, FlagGuardConfig):
        return guards.flag(config.enabled, name=config.name)
    raise TypeError(f"unsupported guard config {type(config).__name__}")


def build_plan(config: PlanConfig) -> Plan:
    """Compile a validated config into a frozen plan.

    Unknown waypoint references raise ``GraphIntegrityError`` and repeated
    origin names raise ``DuplicateOriginError``.
    """

    plan = Plan(skipped_fields=config.settings.skipped_fields)
    plan.add_waypoints(*config.waypoints)
    for sequence in config.sequences:
        for source, target in zip(sequence, sequence[1:]):
            plan.add_edge(source, target)
    for edge in config.edges:
        plan.add_edge(edge.source, edge.target, build_guard(edge.guard), order=edge.order)
    for origin in config.origins:
        plan.add_origin(origin.name, origin.entry, build_guard(origin.guard))
    plan.freeze()

    logger.info(
        "Compiled plan %s v%s: %d waypoints, %d edges, origins=%s",
        config.meta.plan_id,
        config.meta.plan_version,
        len(plan.waypoints()),
        len(plan.edges()),
        [origin.name for origin in plan.origins()],
    )
    return plan


def load_plan(
    base_path: Path | str,
    override_paths: Sequence[Path | str] | None = None,
) -> Plan:
    return build_plan(load_plan_config(base_path, override_paths))
