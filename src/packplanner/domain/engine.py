"""Orchestrator for one planning run.

The engine composes the stage functions but holds no state between runs:
every call to ``run`` rebuilds graph, closure, preflight and plan from its
arguments. Stages are injectable so tests and alternative front ends can
swap one of them without re-wiring the rest.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from .graph import build_graph
from .hierarchy import build_hierarchy
from .plan import PlanDraft, resolve_plan
from .preflight import InstalledSnapshot, plan_preflight
from .selection import resolve_selection
from .titles import DEFAULT_NAMESPACES
from .versioning import detect_version_conflicts

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from .graph import PackGraph
    from .hierarchy import Hierarchy
    from .model import Catalog, PackId
    from .plan import Plan
    from .preflight import PreflightResult
    from .selection import SelectionResult
    from .versioning import DependencyUpdate

log = getLogger(__name__)


class BuildGraph(Protocol):
    def __call__(self, catalog: Catalog) -> PackGraph: ...


class BuildHierarchy(Protocol):
    def __call__(self, graph: PackGraph) -> Hierarchy: ...


class ResolveSelection(Protocol):
    def __call__(self, graph: PackGraph, explicit: Iterable[PackId]) -> SelectionResult: ...


class PlanPreflight(Protocol):
    def __call__(
        self,
        graph: PackGraph,
        selection: SelectionResult,
        snapshot: InstalledSnapshot,
    ) -> PreflightResult: ...


class ResolvePlan(Protocol):
    def __call__(
        self,
        preflight: PreflightResult,
        draft: PlanDraft | None = None,
        *,
        namespaces: Collection[str] = ...,
    ) -> Plan: ...


@dataclass(frozen=True, slots=True, kw_only=True)
class PlanningReport:
    """Everything the UI/API layer needs to render one planning step."""

    graph: PackGraph
    hierarchy: Hierarchy
    selection: SelectionResult
    preflight: PreflightResult
    plan: Plan
    dependency_updates: tuple[DependencyUpdate, ...] = ()


@dataclass(frozen=True, slots=True)
class PlanningEngine:
    """Run graph build, selection, preflight and plan resolution in order."""

    namespaces: Collection[str] = DEFAULT_NAMESPACES
    build_graph: BuildGraph = field(default=build_graph)
    build_hierarchy: BuildHierarchy = field(default=build_hierarchy)
    resolve_selection: ResolveSelection = field(default=resolve_selection)
    plan_preflight: PlanPreflight = field(default=plan_preflight)
    resolve_plan: ResolvePlan = field(default=resolve_plan)

    def run(
        self,
        catalog: Catalog,
        explicit: Iterable[PackId],
        *,
        snapshot: InstalledSnapshot | None = None,
        draft: PlanDraft | None = None,
    ) -> PlanningReport:
        """Compute the full report for ``explicit`` against ``snapshot``."""

        graph = self.build_graph(catalog)
        hierarchy = self.build_hierarchy(graph)
        selection = self.resolve_selection(graph, explicit)
        snapshot = snapshot or InstalledSnapshot()
        preflight = self.plan_preflight(graph, selection, snapshot)
        plan = self.resolve_plan(preflight, draft or PlanDraft(), namespaces=self.namespaces)
        log.debug(
            "Planning run finished: closure=%s, pages=%s, has_cycle=%s",
            len(selection.closure),
            len(preflight.categories),
            graph.has_cycle,
        )
        return PlanningReport(
            graph=graph,
            hierarchy=hierarchy,
            selection=selection,
            preflight=preflight,
            plan=plan,
            dependency_updates=detect_version_conflicts(
                graph,
                selection,
                {pack_id: state.installed_version for pack_id, state in snapshot.packs.items()},
            ),
        )
