"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from packplanner.adapters.draft import load_plan_draft
from packplanner.adapters.installed import JsonInstalledRegistry, capture_snapshot
from packplanner.adapters.manifest import load_manifest
from packplanner.config import get_planner_config
from packplanner.domain.engine import PlanningEngine
from packplanner.domain.graph import build_graph
from packplanner.domain.hierarchy import build_hierarchy
from packplanner.domain.plan import PlanDraft
from packplanner.domain.preflight import InstalledSnapshot
from packplanner.domain.versioning import compute_update_paths

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from packplanner.config import PlannerConfig
    from packplanner.domain.engine import PlanningReport
    from packplanner.domain.graph import PackGraph
    from packplanner.domain.hierarchy import Hierarchy
    from packplanner.domain.model import Catalog, PackId
    from packplanner.domain.ports import InstalledRegistry, ManifestSource
    from packplanner.domain.versioning import UpdatePath


log = getLogger(__name__)


def describe_catalog(catalog_path: Path) -> tuple[PackGraph, Hierarchy]:
    """Load a manifest and return its graph and display tree."""

    graph = build_graph(load_manifest(catalog_path))
    return graph, build_hierarchy(graph)


def plan_for_catalog(
    catalog: Catalog,
    explicit: Iterable[PackId],
    *,
    registry: InstalledRegistry | None = None,
    draft: PlanDraft | None = None,
    config: PlannerConfig | None = None,
) -> PlanningReport:
    """Run the planning engine against the live registry state."""

    effective_config = config or get_planner_config()
    snapshot = InstalledSnapshot()
    if registry is not None:
        snapshot = capture_snapshot(
            registry,
            pages=catalog.page_ids,
            packs=catalog.pack_ids,
        )
    effective_draft = draft or PlanDraft(global_prefix=effective_config.default_global_prefix)
    engine = PlanningEngine(namespaces=effective_config.namespaces)
    report = engine.run(catalog, explicit, snapshot=snapshot, draft=effective_draft)
    for update in report.dependency_updates:
        log.info("Dependency update: %s", update.message)
    return report


def plan_installation(
    catalog_path: Path,
    explicit: Iterable[PackId],
    *,
    installed_path: Path | None = None,
    draft_path: Path | None = None,
    config: PlannerConfig | None = None,
) -> PlanningReport:
    """Plan an installation from files on disk."""

    effective_config = config or get_planner_config()
    selected = tuple(explicit)
    log.info("Planning installation: catalog=%s, selected=%s", catalog_path, ", ".join(selected))

    catalog = load_manifest(catalog_path)
    registry = JsonInstalledRegistry.from_path(installed_path) if installed_path else None
    draft = (
        load_plan_draft(draft_path, default_prefix=effective_config.default_global_prefix)
        if draft_path
        else None
    )
    report = plan_for_catalog(
        catalog,
        selected,
        registry=registry,
        draft=draft,
        config=effective_config,
    )
    log.info(
        "Finished planning: closure=%s, locked=%s, unresolved=%s",
        len(report.selection.closure),
        len(report.selection.locks),
        len(report.plan.unresolved_conflicts),
    )
    return report


def plan_from_source(
    source: ManifestSource,
    repo: str,
    ref: str,
    explicit: Iterable[PackId],
    *,
    registry: InstalledRegistry | None = None,
    draft: PlanDraft | None = None,
    config: PlannerConfig | None = None,
) -> PlanningReport:
    """Fetch a catalog through ``source`` and plan against it."""

    catalog = source.fetch(repo, ref)
    return plan_for_catalog(catalog, explicit, registry=registry, draft=draft, config=config)


def check_updates(catalog_path: Path, installed_path: Path) -> dict[PackId, UpdatePath]:
    """Report which installed packs have a different version in the catalog."""

    catalog = load_manifest(catalog_path)
    registry = JsonInstalledRegistry.from_path(installed_path)
    return compute_update_paths(catalog, registry.installed_pack_versions())
