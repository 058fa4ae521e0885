"""Classify candidate pages against the wiki's installed state.

Every candidate page lands in exactly one ``PreflightCategory``. The checks
run in a fixed priority order:

1. pack/pack conflict: several packs in the closure claim the page, or the
   wiki records a different pack as its owner
2. external collision: the page exists but no pack owns it
3. update unchanged: owned by the candidate pack at the same version
4. update modified: owned by the candidate pack at another version, or the
   registry reports local edits
5. create: everything else

Content comparison is the registry's concern. It may set
``PageState.content_modified`` and this module only honours the flag.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .versioning import compare_versions

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .graph import PackGraph
    from .model import PackId, PageId
    from .selection import SelectionConflict, SelectionResult

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class PageState:
    """Installed-registry view of one wiki page."""

    exists: bool = False
    owning_pack: PackId | None = None
    installed_version: str | None = None
    content_modified: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class PackState:
    installed_version: str | None = None


_MISSING_PAGE = PageState()


@dataclass(frozen=True, slots=True, kw_only=True)
class InstalledSnapshot:
    """Point-in-time registry state handed to the planner."""

    pages: Mapping[PageId, PageState] = field(default_factory=dict["PageId", PageState])
    packs: Mapping[PackId, PackState] = field(default_factory=dict["PackId", PackState])

    def state_for(self, page: PageId) -> PageState:
        return self.pages.get(page, _MISSING_PAGE)

    def installed_pack_version(self, pack_id: PackId) -> str | None:
        state = self.packs.get(pack_id)
        return state.installed_version if state is not None else None


class PreflightCategory(StrEnum):
    CREATE = "create"
    UPDATE_UNCHANGED = "update_unchanged"
    UPDATE_MODIFIED = "update_modified"
    PACK_PACK_CONFLICT = "pack_pack_conflict"
    EXTERNAL_COLLISION = "external_collision"

    @property
    def is_conflict(self) -> bool:
        return self in (PreflightCategory.PACK_PACK_CONFLICT, PreflightCategory.EXTERNAL_COLLISION)

    @property
    def is_update(self) -> bool:
        return self in (PreflightCategory.UPDATE_UNCHANGED, PreflightCategory.UPDATE_MODIFIED)


@dataclass(frozen=True, slots=True, kw_only=True)
class PreflightResult:
    categories: dict[PageId, PreflightCategory]
    owners: dict[PageId, tuple[PackId, ...]] = field(
        default_factory=dict["PageId", "tuple[PackId, ...]"]
    )
    selection_conflicts: tuple[SelectionConflict, ...] = ()

    @property
    def pages(self) -> tuple[PageId, ...]:
        return tuple(self.categories)

    def category_for(self, page: PageId) -> PreflightCategory | None:
        return self.categories.get(page)

    def pages_in(self, category: PreflightCategory) -> tuple[PageId, ...]:
        return tuple(page for page, found in self.categories.items() if found is category)

    def counts(self) -> dict[PreflightCategory, int]:
        totals = dict.fromkeys(PreflightCategory, 0)
        for category in self.categories.values():
            totals[category] += 1
        return totals


def classify_page(
    page: PageId,
    *,
    owners: tuple[PackId, ...],
    state: PageState,
    candidate_version: str | None,
    installed_pack_version: str | None = None,
) -> PreflightCategory:
    """Classify one page. Total: every input maps to exactly one category."""

    if len(owners) > 1:
        return PreflightCategory.PACK_PACK_CONFLICT
    if not state.exists:
        return PreflightCategory.CREATE
    if state.owning_pack is None:
        return PreflightCategory.EXTERNAL_COLLISION
    if state.owning_pack not in owners:
        log.debug(
            "Page %s is owned by %s in the wiki but claimed by %s",
            page,
            state.owning_pack,
            ", ".join(owners),
        )
        return PreflightCategory.PACK_PACK_CONFLICT

    installed_version = state.installed_version or installed_pack_version
    if state.content_modified or compare_versions(installed_version, candidate_version) != 0:
        return PreflightCategory.UPDATE_MODIFIED
    return PreflightCategory.UPDATE_UNCHANGED


def plan_preflight(
    graph: PackGraph,
    selection: SelectionResult,
    snapshot: InstalledSnapshot,
) -> PreflightResult:
    """Classify every page in the selection closure."""

    categories: dict[PageId, PreflightCategory] = {}
    for page, owners in selection.page_owners.items():
        owner = owners[0] if len(owners) == 1 else None
        pack = graph.pack_for(owner) if owner is not None else None
        categories[page] = classify_page(
            page,
            owners=owners,
            state=snapshot.state_for(page),
            candidate_version=pack.version if pack is not None else None,
            installed_pack_version=(
                snapshot.installed_pack_version(owner) if owner is not None else None
            ),
        )

    result = PreflightResult(
        categories=categories,
        owners=dict(selection.page_owners),
        selection_conflicts=selection.selection_conflicts,
    )
    log.info(
        "Preflight: %s",
        ", ".join(f"{category}={count}" for category, count in result.counts().items()),
    )
    return result
