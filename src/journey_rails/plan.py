"""Directed graph of waypoints, guarded edges and named origins."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import DuplicateOriginError, GraphIntegrityError, UnknownOriginError
from .guards import Guard, SkippedFieldPolicy, always
from .utils import is_waypoint_id, join_path


@dataclass(frozen=True)
class Edge:
    """Guarded transition between two waypoints."""

    source: str
    target: str
    guard: Guard = field(default_factory=always)
    order: int = 0
    sequence: int = 0


@dataclass(frozen=True)
class Origin:
    """Named entry point into the plan, optionally gated by its own guard."""

    name: str
    entry: str
    guard: Guard = field(default_factory=always)

    @property
    def path(self) -> str:
        return join_path(self.name)


class Plan:
    """Journey plan built during composition and read-only once frozen.

    Out-edges are kept in evaluation order: ascending ``order`` and, within
    the same order, declaration order. An edge without an explicit order
    takes its index among the out-edges already declared on its source.
    """

    def __init__(self, skipped_fields: SkippedFieldPolicy = "absent"):
        if skipped_fields not in ("absent", "inapplicable"):
            raise GraphIntegrityError(f"unknown skipped-field policy '{skipped_fields}'")
        self.skipped_fields: SkippedFieldPolicy = skipped_fields
        self._waypoints: dict[str, None] = {}
        self._out_edges: dict[str, list[Edge]] = {}
        self._origins: dict[str, Origin] = {}
        self._edge_count = 0
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add_waypoint(self, waypoint_id: str) -> "Plan":
        self._ensure_mutable()
        if not is_waypoint_id(waypoint_id):
            raise GraphIntegrityError(f"invalid waypoint id {waypoint_id!r}")
        self._waypoints.setdefault(waypoint_id, None)
        self._out_edges.setdefault(waypoint_id, [])
        return self

    def add_waypoints(self, *waypoint_ids: str) -> "Plan":
        for waypoint_id in waypoint_ids:
            self.add_waypoint(waypoint_id)
        return self

    def add_edge(
        self,
        source: str,
        target: str,
        guard: Guard | None = None,
        order: int | None = None,
    ) -> Edge:
        self._ensure_mutable()
        for waypoint_id in (source, target):
            if waypoint_id not in self._waypoints:
                raise GraphIntegrityError(
                    f"edge {source} -> {target} references unknown waypoint '{waypoint_id}'"
                )

        edge = Edge(
            source=source,
            target=target,
            guard=guard or always(),
            order=len(self._out_edges[source]) if order is None else order,
            sequence=self._edge_count,
        )
        self._edge_count += 1
        edges = self._out_edges[source]
        edges.append(edge)
        edges.sort(key=lambda item: (item.order, item.sequence))
        return edge

    def add_sequence(self, *waypoint_ids: str) -> "Plan":
        """Chain waypoints with unconditional edges, declaring them as needed."""

        self.add_waypoints(*waypoint_ids)
        for source, target in zip(waypoint_ids, waypoint_ids[1:]):
            self.add_edge(source, target)
        return self

    def add_origin(self, name: str, entry: str, guard: Guard | None = None) -> Origin:
        self._ensure_mutable()
        if not is_waypoint_id(name):
            raise GraphIntegrityError(f"invalid origin name {name!r}")
        if name in self._origins:
            raise DuplicateOriginError(name)
        if entry not in self._waypoints:
            raise GraphIntegrityError(f"origin '{name}' references unknown waypoint '{entry}'")
        origin = Origin(name=name, entry=entry, guard=guard or always())
        self._origins[name] = origin
        return origin

    def freeze(self) -> "Plan":
        """End composition; all later mutation raises ``GraphIntegrityError``."""

        self._frozen = True
        return self

    def out_edges(self, waypoint_id: str) -> tuple[Edge, ...]:
        return tuple(self._out_edges.get(waypoint_id, ()))

    def origin(self, name: str) -> Origin:
        try:
            return self._origins[name]
        except KeyError:
            raise UnknownOriginError(name) from None

    def waypoint_exists(self, waypoint_id: str) -> bool:
        return waypoint_id in self._waypoints

    def waypoints(self) -> tuple[str, ...]:
        return tuple(self._waypoints)

    def edges(self) -> tuple[Edge, ...]:
        return tuple(edge for edges in self._out_edges.values() for edge in edges)

    def origins(self) -> tuple[Origin, ...]:
        return tuple(self._origins.values())

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise GraphIntegrityError("plan is frozen; compose it before traversal begins")
