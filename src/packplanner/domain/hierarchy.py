"""Display tree of packs and pages derived from a ``PackGraph``."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .graph import PackGraph
    from .model import PackId, PageId


class NodeType(StrEnum):
    PACK = "pack"
    PAGE = "page"


@dataclass(frozen=True, slots=True, kw_only=True)
class HierarchyNode:
    id: str
    node_type: NodeType
    children: tuple[HierarchyNode, ...] = ()
    packs_beneath: int = 0
    pages_beneath: int = 0


@dataclass(frozen=True, slots=True, kw_only=True)
class Hierarchy:
    tree: tuple[HierarchyNode, ...]
    pack_count: int
    page_count: int


@dataclass(slots=True)
class _Frame:
    pack_id: PackId
    dependencies: tuple[PackId, ...]
    position: int = 0
    children: list[HierarchyNode] = field(default_factory=list["HierarchyNode"])
    packs_beneath: int = 0
    pages_beneath: int = 0

    def add(self, child: HierarchyNode) -> None:
        self.children.append(child)
        self.packs_beneath += 1 + child.packs_beneath
        self.pages_beneath += child.pages_beneath

    def finish(self, pages: tuple[PageId, ...]) -> HierarchyNode:
        page_children = [HierarchyNode(id=page, node_type=NodeType.PAGE) for page in pages]
        return HierarchyNode(
            id=self.pack_id,
            node_type=NodeType.PACK,
            children=(*self.children, *page_children),
            packs_beneath=self.packs_beneath,
            pages_beneath=self.pages_beneath + len(page_children),
        )


def _build_node(graph: PackGraph, root: PackId, reached: set[PackId]) -> HierarchyNode:
    # explicit frame stack: long dependency chains must not hit the recursion limit
    path = {root}
    reached.add(root)
    frames = [_Frame(root, graph.dependencies_of(root))]
    while True:
        frame = frames[-1]
        if frame.position < len(frame.dependencies):
            dependency = frame.dependencies[frame.position]
            frame.position += 1
            if dependency in path:
                frame.add(HierarchyNode(id=dependency, node_type=NodeType.PACK))
                continue
            path.add(dependency)
            reached.add(dependency)
            frames.append(_Frame(dependency, graph.dependencies_of(dependency)))
            continue

        frames.pop()
        path.discard(frame.pack_id)
        node = frame.finish(graph.pages_of(frame.pack_id))
        if not frames:
            return node
        frames[-1].add(node)


def build_hierarchy(graph: PackGraph) -> Hierarchy:
    """Nest each root pack's dependencies and pages beneath it.

    A pack shared by several parents appears under each of them. A pack that
    is re-entered along the current path is emitted as an empty leaf.
    """

    reached: set[PackId] = set()
    tree = [_build_node(graph, root, reached) for root in graph.roots_ordered]
    # packs caught in a cycle with no root above them still get a top-level node
    for pack_id in graph.catalog.pack_ids:
        if pack_id not in reached:
            tree.append(_build_node(graph, pack_id, reached))

    return Hierarchy(
        tree=tuple(tree),
        pack_count=len(graph.packs),
        page_count=len(graph.catalog.page_ids),
    )
