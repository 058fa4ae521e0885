from __future__ import annotations

from packplanner.domain.graph import build_graph
from packplanner.domain.hierarchy import NodeType, build_hierarchy
from tests.helpers.catalogs import (
    chain_catalog,
    cyclic_catalog,
    long_chain_catalog,
    make_catalog,
    make_pack,
)


def test_hierarchy_nests_dependencies_before_pages() -> None:
    hierarchy = build_hierarchy(build_graph(chain_catalog()))

    assert [node.id for node in hierarchy.tree] == ["C"]
    root = hierarchy.tree[0]
    assert [(child.id, child.node_type) for child in root.children] == [
        ("B", NodeType.PACK),
        ("C1", NodeType.PAGE),
    ]
    pack_b = root.children[0]
    assert [child.id for child in pack_b.children] == ["A", "B1"]
    assert root.packs_beneath == 2
    assert root.pages_beneath == 3
    assert hierarchy.pack_count == 3
    assert hierarchy.page_count == 3


def test_hierarchy_repeats_shared_dependency_under_each_parent() -> None:
    catalog = make_catalog(
        make_pack("base", pages=("Template:Card",)),
        make_pack("left", depends_on=("base",)),
        make_pack("right", depends_on=("base",)),
    )

    hierarchy = build_hierarchy(build_graph(catalog))

    assert [node.id for node in hierarchy.tree] == ["left", "right"]
    for node in hierarchy.tree:
        assert [child.id for child in node.children] == ["base"]
        assert node.pages_beneath == 1
    assert hierarchy.page_count == 1


def test_hierarchy_terminates_on_cycle() -> None:
    hierarchy = build_hierarchy(build_graph(cyclic_catalog()))

    assert [node.id for node in hierarchy.tree] == ["A"]
    node_a = hierarchy.tree[0]
    node_b = node_a.children[0]
    node_c = node_b.children[0]
    assert node_c.id == "C"
    reentered = node_c.children[0]
    assert reentered.id == "A"
    assert reentered.children == ()
    assert hierarchy.pack_count == 3


def test_hierarchy_keeps_cycle_below_a_root() -> None:
    catalog = make_catalog(
        make_pack("A", depends_on=("B",)),
        make_pack("B", depends_on=("A",)),
        make_pack("app", depends_on=("A",)),
    )

    hierarchy = build_hierarchy(build_graph(catalog))

    assert [node.id for node in hierarchy.tree] == ["app"]


def test_hierarchy_handles_chains_deeper_than_the_recursion_limit() -> None:
    hierarchy = build_hierarchy(build_graph(long_chain_catalog(1500)))

    assert [node.id for node in hierarchy.tree] == ["pack-1499"]
    root = hierarchy.tree[0]
    assert root.packs_beneath == 1499
    assert root.pages_beneath == 1500
    assert [child.id for child in root.children] == ["pack-1498", "page-1499"]
