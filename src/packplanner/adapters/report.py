"""Plain nested-dict encoding of planning results for the CLI/API layer.

Sets are emitted as sorted lists and mappings keep the engine's deterministic
order, so encoding the same report twice yields identical JSON.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from packplanner.domain.engine import PlanningReport
    from packplanner.domain.graph import PackGraph
    from packplanner.domain.hierarchy import Hierarchy, HierarchyNode
    from packplanner.domain.plan import Plan
    from packplanner.domain.preflight import PreflightResult
    from packplanner.domain.selection import SelectionResult
    from packplanner.domain.versioning import DependencyUpdate, UpdatePath


def encode_graph_summary(graph: PackGraph) -> dict[str, Any]:
    return {
        "pack_count": len(graph.packs),
        "page_count": len(graph.catalog.page_ids),
        "has_cycle": graph.has_cycle,
        "cycle_members": sorted(graph.cycle_members),
        "roots": list(graph.roots_ordered),
        "edges": [
            {"from": edge.source, "to": edge.target, "relation": str(edge.relation)}
            for edge in graph.edges
        ],
        "transitive_depends": {
            pack_id: sorted(deps) for pack_id, deps in graph.transitive_depends.items()
        },
        "reverse_depends": {
            pack_id: sorted(deps) for pack_id, deps in graph.reverse_depends.items()
        },
    }


def _encode_node(node: HierarchyNode) -> dict[str, Any]:
    return {
        "id": node.id,
        "type": str(node.node_type),
        "packs_beneath": node.packs_beneath,
        "pages_beneath": node.pages_beneath,
        "children": [_encode_node(child) for child in node.children],
    }


def encode_hierarchy(hierarchy: Hierarchy) -> dict[str, Any]:
    return {
        "pack_count": hierarchy.pack_count,
        "page_count": hierarchy.page_count,
        "tree": [_encode_node(node) for node in hierarchy.tree],
    }


def encode_selection(selection: SelectionResult) -> dict[str, Any]:
    return {
        "explicit": sorted(selection.explicit),
        "closure": sorted(selection.closure),
        "locks": dict(selection.locks),
        "page_owners": {page: list(owners) for page, owners in selection.page_owners.items()},
        "selection_conflicts": [
            {"page": conflict.page, "owners": list(conflict.owners)}
            for conflict in selection.selection_conflicts
        ],
    }


def encode_preflight(preflight: PreflightResult) -> dict[str, Any]:
    return {
        "counts": {str(category): count for category, count in preflight.counts().items()},
        "pages": {page: str(category) for page, category in preflight.categories.items()},
        "selection_conflicts": [
            {"page": conflict.page, "owners": list(conflict.owners)}
            for conflict in preflight.selection_conflicts
        ],
    }


def encode_plan(plan: Plan) -> dict[str, Any]:
    return {
        "summary": plan.summary.as_dict(),
        "pages": [
            {
                "page": entry.page,
                "category": str(entry.category),
                "action": str(entry.action),
                "final_title": entry.final_title,
                "backup": entry.backup,
            }
            for entry in plan.entries
        ],
        "unresolved_conflicts": list(plan.unresolved_conflicts),
        "title_clashes": [
            {"title": clash.title, "pages": list(clash.pages)} for clash in plan.title_clashes
        ],
    }


def encode_dependency_updates(updates: tuple[DependencyUpdate, ...]) -> list[dict[str, Any]]:
    return [
        {
            "pack": update.pack,
            "required_by": update.required_by,
            "current_version": update.current_version,
            "required_version": update.required_version,
            "message": update.message,
        }
        for update in updates
    ]


def encode_report(report: PlanningReport) -> dict[str, Any]:
    return {
        "graph_summary": encode_graph_summary(report.graph),
        "hierarchy_tree": encode_hierarchy(report.hierarchy),
        "selection_result": encode_selection(report.selection),
        "preflight_result": encode_preflight(report.preflight),
        "plan": encode_plan(report.plan),
        "dependency_updates": encode_dependency_updates(report.dependency_updates),
    }


def encode_update_paths(paths: dict[str, UpdatePath]) -> dict[str, Any]:
    return {
        pack_id: {
            "action": str(path.action),
            "current": path.current,
            "available": path.available,
            "message": path.message,
        }
        for pack_id, path in paths.items()
    }
