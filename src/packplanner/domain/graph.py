"""Pack dependency graph with cycle detection and derived closure sets.

The graph is built in one depth-first walk over ``DEPENDS`` edges. The walk
colours packs white/grey/black for cycle detection and, at the same time,
groups strongly connected packs so that transitive dependencies are computed
once per group and shared by its members. A cyclic catalog is a reportable
fact: ``build_graph`` never raises for it. Callers that need an install order
use ``PackGraph.require_acyclic`` or ``PackGraph.install_order``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import DependencyCycleError
from .model import Edge, EdgeRelation

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .model import Catalog, Pack, PackId, PageId

log = getLogger(__name__)


class _Colour(Enum):
    WHITE = 0
    GREY = 1
    BLACK = 2


@dataclass(frozen=True, slots=True, kw_only=True)
class PackGraph:
    """Derived view of one catalog snapshot."""

    catalog: Catalog
    contains_edges: tuple[Edge, ...]
    depends_edges: tuple[Edge, ...]
    has_cycle: bool
    transitive_depends: Mapping[PackId, frozenset[PackId]]
    reverse_depends: Mapping[PackId, frozenset[PackId]]
    roots: frozenset[PackId]
    cycle_members: frozenset[PackId] = frozenset()
    _finish_order: tuple[PackId, ...] = field(default=(), repr=False)

    @property
    def edges(self) -> tuple[Edge, ...]:
        return self.depends_edges + self.contains_edges

    @property
    def packs(self) -> tuple[Pack, ...]:
        return self.catalog.packs

    @property
    def roots_ordered(self) -> tuple[PackId, ...]:
        return tuple(pack_id for pack_id in self.catalog.pack_ids if pack_id in self.roots)

    def pack_for(self, pack_id: PackId) -> Pack | None:
        return self.catalog.pack_for(pack_id)

    def pages_of(self, pack_id: PackId) -> tuple[PageId, ...]:
        pack = self.catalog.pack_for(pack_id)
        return pack.pages if pack is not None else ()

    def dependencies_of(self, pack_id: PackId) -> tuple[PackId, ...]:
        pack = self.catalog.pack_for(pack_id)
        return pack.depends_on if pack is not None else ()

    def require_acyclic(self) -> None:
        if self.has_cycle:
            raise DependencyCycleError(self.cycle_members)

    def install_order(self) -> tuple[PackId, ...]:
        """Return every pack with its dependencies listed before it."""

        self.require_acyclic()
        return self._finish_order


@dataclass(slots=True)
class _DependencyWalk:
    catalog: Catalog
    colour: dict[PackId, _Colour] = field(default_factory=dict["PackId", "_Colour"])
    index: dict[PackId, int] = field(default_factory=dict["PackId", int])
    lowlink: dict[PackId, int] = field(default_factory=dict["PackId", int])
    stack: list[PackId] = field(default_factory=list["PackId"])
    on_stack: set[PackId] = field(default_factory=set["PackId"])
    closure: dict[PackId, frozenset[PackId]] = field(
        default_factory=dict["PackId", "frozenset[PackId]"]
    )
    cycle_members: set[PackId] = field(default_factory=set["PackId"])
    finish_order: list[PackId] = field(default_factory=list["PackId"])
    has_cycle: bool = False

    def run(self) -> None:
        for pack_id in self.catalog.pack_ids:
            self.colour.setdefault(pack_id, _Colour.WHITE)
        for pack_id in self.catalog.pack_ids:
            if self.colour[pack_id] is _Colour.WHITE:
                self._visit(pack_id)

    def _dependencies(self, pack_id: PackId) -> tuple[PackId, ...]:
        pack = self.catalog.pack_for(pack_id)
        return pack.depends_on if pack is not None else ()

    def _enter(self, pack_id: PackId) -> None:
        self.colour[pack_id] = _Colour.GREY
        self.index[pack_id] = self.lowlink[pack_id] = len(self.index)
        self.stack.append(pack_id)
        self.on_stack.add(pack_id)

    def _visit(self, start: PackId) -> None:
        # frames hold (pack, next dependency position) so deep chains never recurse
        self._enter(start)
        frames: list[tuple[PackId, int]] = [(start, 0)]
        while frames:
            pack_id, position = frames[-1]
            dependencies = self._dependencies(pack_id)
            if position < len(dependencies):
                frames[-1] = (pack_id, position + 1)
                dependency = dependencies[position]
                state = self.colour[dependency]
                if state is _Colour.GREY:
                    self.has_cycle = True
                if state is _Colour.WHITE:
                    self._enter(dependency)
                    frames.append((dependency, 0))
                elif dependency in self.on_stack:
                    self.lowlink[pack_id] = min(self.lowlink[pack_id], self.index[dependency])
                continue

            frames.pop()
            self.colour[pack_id] = _Colour.BLACK
            if self.lowlink[pack_id] == self.index[pack_id]:
                self._close_component(pack_id)
            if frames:
                parent = frames[-1][0]
                self.lowlink[parent] = min(self.lowlink[parent], self.lowlink[pack_id])

    def _close_component(self, head: PackId) -> None:
        members: list[PackId] = []
        while True:
            member = self.stack.pop()
            self.on_stack.discard(member)
            members.append(member)
            if member == head:
                break

        member_set = set(members)
        reachable: set[PackId] = set()
        cyclic = len(members) > 1
        for member in members:
            for dependency in self._dependencies(member):
                if dependency in member_set:
                    cyclic = True
                    continue
                # components complete dependencies-first, so this is memoized
                reachable.add(dependency)
                reachable.update(self.closure[dependency])
        if cyclic:
            reachable.update(member_set)
            self.cycle_members.update(member_set)

        for member in members:
            self.closure[member] = frozenset(reachable - {member})
        self.finish_order.extend(reversed(members))


def build_graph(catalog: Catalog) -> PackGraph:
    """Derive edges, cycle state and closure sets from ``catalog``."""

    contains_edges: list[Edge] = []
    depends_edges: list[Edge] = []
    dependents: dict[PackId, set[PackId]] = {pack_id: set() for pack_id in catalog.pack_ids}
    for pack in catalog.packs:
        for dependency in pack.depends_on:
            depends_edges.append(Edge(pack.id, dependency, EdgeRelation.DEPENDS))
            dependents[dependency].add(pack.id)
        for page in pack.pages:
            contains_edges.append(Edge(pack.id, page, EdgeRelation.CONTAINS))

    walk = _DependencyWalk(catalog)
    walk.run()
    if walk.has_cycle:
        log.warning(
            "Dependency cycle detected among packs: %s",
            ", ".join(sorted(walk.cycle_members)),
        )

    roots = frozenset(pack_id for pack_id, deps in dependents.items() if not deps)
    log.debug(
        "Built pack graph: packs=%s, depends=%s, contains=%s, roots=%s",
        len(catalog.packs),
        len(depends_edges),
        len(contains_edges),
        len(roots),
    )
    return PackGraph(
        catalog=catalog,
        contains_edges=tuple(contains_edges),
        depends_edges=tuple(depends_edges),
        has_cycle=walk.has_cycle,
        transitive_depends={
            pack_id: walk.closure[pack_id] for pack_id in catalog.pack_ids
        },
        reverse_depends={pack_id: frozenset(deps) for pack_id, deps in dependents.items()},
        roots=roots,
        cycle_members=frozenset(walk.cycle_members),
        _finish_order=tuple(walk.finish_order),
    )
