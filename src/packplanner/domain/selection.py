"""Expand an explicit pack selection into its dependency closure.

Selecting a pack pulls in everything it depends on, transitively. Packs that
end up in the closure without being chosen are *locked*: they cannot be
deselected while a pack that requires them stays selected. This module only
reports locks; enforcing them is the caller's job.

Page ownership is derived from the closure. When two packs in the closure
declare the same page, both owners are kept and the page is reported as a
selection conflict instead of letting one pack silently win.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import CatalogInconsistentError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .graph import PackGraph
    from .model import PackId, PageId

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SelectionConflict:
    """A page claimed by more than one pack in the closure."""

    page: PageId
    owners: tuple[PackId, ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class SelectionResult:
    explicit: frozenset[PackId]
    closure: frozenset[PackId]
    locks: dict[PackId, str] = field(default_factory=dict["PackId", str])
    page_owners: dict[PageId, tuple[PackId, ...]] = field(
        default_factory=dict["PageId", "tuple[PackId, ...]"]
    )
    selection_conflicts: tuple[SelectionConflict, ...] = ()

    @property
    def candidate_pages(self) -> tuple[PageId, ...]:
        return tuple(self.page_owners)

    @property
    def locked(self) -> frozenset[PackId]:
        return frozenset(self.locks)

    def owner_for(self, page: PageId) -> PackId | None:
        """Return the single owning pack, or ``None`` for unknown or conflicting pages."""

        owners = self.page_owners.get(page, ())
        return owners[0] if len(owners) == 1 else None

    def is_conflicted(self, page: PageId) -> bool:
        return len(self.page_owners.get(page, ())) > 1


@dataclass(frozen=True, slots=True)
class DeselectionCheck:
    pack_id: PackId
    allowed: bool
    required_by: tuple[PackId, ...] = ()


def resolve_selection(graph: PackGraph, explicit: Iterable[PackId]) -> SelectionResult:
    """Compute closure, locks and page ownership for ``explicit``."""

    chosen = frozenset(explicit)
    for pack_id in sorted(chosen):
        if graph.pack_for(pack_id) is None:
            raise CatalogInconsistentError(
                f"Selected pack is not in the catalog: {pack_id}",
                reference=pack_id,
            )

    seen: set[PackId] = set()
    locks: dict[PackId, str] = {}
    # sorted so the lock reason names the same requiring pack on every run
    for requester in sorted(chosen):
        _collect(graph, requester, requester=requester, chosen=chosen, seen=seen, locks=locks)

    closure = frozenset(seen)
    page_owners, conflicts = _page_owners(graph, closure)
    if conflicts:
        log.info(
            "Selection has %s page(s) claimed by several packs: %s",
            len(conflicts),
            ", ".join(conflict.page for conflict in conflicts),
        )
    log.debug(
        "Resolved selection: explicit=%s, closure=%s, locked=%s",
        len(chosen),
        len(closure),
        len(locks),
    )
    return SelectionResult(
        explicit=chosen,
        closure=closure,
        locks={pack_id: locks[pack_id] for pack_id in sorted(locks)},
        page_owners=page_owners,
        selection_conflicts=conflicts,
    )


def _collect(
    graph: PackGraph,
    pack_id: PackId,
    *,
    requester: PackId,
    chosen: frozenset[PackId],
    seen: set[PackId],
    locks: dict[PackId, str],
) -> None:
    stack = [pack_id]
    while stack:
        current = stack.pop()
        if current in seen:
            continue
        seen.add(current)
        if current not in chosen:
            locks.setdefault(current, f"required by {requester}")
        stack.extend(reversed(graph.dependencies_of(current)))


def _page_owners(
    graph: PackGraph,
    closure: frozenset[PackId],
) -> tuple[dict[PageId, tuple[PackId, ...]], tuple[SelectionConflict, ...]]:
    owners: dict[PageId, list[PackId]] = {}
    for pack in graph.packs:
        if pack.id not in closure:
            continue
        for page in pack.pages:
            owners.setdefault(page, []).append(pack.id)

    conflicts = tuple(
        SelectionConflict(page=page, owners=tuple(pack_ids))
        for page, pack_ids in owners.items()
        if len(pack_ids) > 1
    )
    return {page: tuple(pack_ids) for page, pack_ids in owners.items()}, conflicts


def check_deselection(
    graph: PackGraph,
    selection: SelectionResult,
    pack_id: PackId,
) -> DeselectionCheck:
    """Report whether ``pack_id`` can leave the selection.

    A pack is held in place by every other selected pack that requires it,
    directly or transitively.
    """

    required_by = tuple(
        sorted(
            other
            for other in selection.explicit
            if other != pack_id and pack_id in graph.transitive_depends.get(other, frozenset())
        )
    )
    return DeselectionCheck(pack_id=pack_id, allowed=not required_by, required_by=required_by)
