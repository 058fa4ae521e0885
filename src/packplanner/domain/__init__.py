"""Pure planning engine for content pack installation.

Flow of one planning run:
1) build the pack graph from a catalog (edges, cycles, closure sets)
2) expand the explicit selection into its dependency closure
3) classify candidate pages against the installed-state snapshot
4) apply the user draft to compute final titles and actions

Nothing in this package performs I/O or keeps state between calls.
"""

from __future__ import annotations

from .engine import PlanningEngine, PlanningReport
from .errors import (
    CatalogInconsistentError,
    DependencyCycleError,
    PlanningError,
    UnknownPageInDraftError,
)
from .graph import PackGraph, build_graph
from .hierarchy import Hierarchy, HierarchyNode, NodeType, build_hierarchy
from .model import Catalog, Edge, EdgeRelation, Pack, PackId, PageId
from .plan import (
    DraftAction,
    Plan,
    PlanAction,
    PlanDraft,
    PlanEntry,
    PlanSummary,
    Rename,
    Skip,
    TitleClash,
    UpdateOverwrite,
    resolve_plan,
)
from .preflight import (
    InstalledSnapshot,
    PackState,
    PageState,
    PreflightCategory,
    PreflightResult,
    classify_page,
    plan_preflight,
)
from .selection import (
    DeselectionCheck,
    SelectionConflict,
    SelectionResult,
    check_deselection,
    resolve_selection,
)
from .versioning import (
    DependencyUpdate,
    UpdateAction,
    UpdatePath,
    Version,
    compare_versions,
    compute_update_paths,
    detect_version_conflicts,
    format_version,
    parse_version,
    same_major,
)

__all__ = [
    "Catalog",
    "CatalogInconsistentError",
    "DependencyCycleError",
    "DependencyUpdate",
    "DeselectionCheck",
    "DraftAction",
    "Edge",
    "EdgeRelation",
    "Hierarchy",
    "HierarchyNode",
    "InstalledSnapshot",
    "NodeType",
    "Pack",
    "PackGraph",
    "PackId",
    "PackState",
    "PageId",
    "PageState",
    "Plan",
    "PlanAction",
    "PlanDraft",
    "PlanEntry",
    "PlanSummary",
    "PlanningEngine",
    "PlanningError",
    "PlanningReport",
    "PreflightCategory",
    "PreflightResult",
    "Rename",
    "SelectionConflict",
    "SelectionResult",
    "Skip",
    "TitleClash",
    "UnknownPageInDraftError",
    "UpdateAction",
    "UpdateOverwrite",
    "UpdatePath",
    "Version",
    "build_graph",
    "build_hierarchy",
    "check_deselection",
    "classify_page",
    "compare_versions",
    "compute_update_paths",
    "detect_version_conflicts",
    "format_version",
    "parse_version",
    "plan_preflight",
    "resolve_plan",
    "resolve_selection",
    "same_major",
]
