"""Turn a preflight result and a user draft into a final install plan.

The plan is a pure function of its inputs: the same preflight and draft
always produce an equal ``Plan``. Nothing here is persisted; callers rebuild
the plan whenever the selection or the draft changes.

Draft actions are a closed union (``Skip | Rename | UpdateOverwrite``) so a
backup request can only travel with an overwrite.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, TypeAlias

from .errors import UnknownPageInDraftError
from .titles import DEFAULT_NAMESPACES, prefixed_title, renamed_title

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping

    from .model import PageId
    from .preflight import PreflightCategory, PreflightResult

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Skip:
    """Leave the page out of the plan."""


@dataclass(frozen=True, slots=True)
class Rename:
    """Install the page under another title."""

    to: str

    def __post_init__(self) -> None:
        if not self.to.strip():
            raise ValueError("Rename target must not be empty")


@dataclass(frozen=True, slots=True)
class UpdateOverwrite:
    """Overwrite the existing page, optionally keeping a backup of it."""

    backup: bool = False


DraftAction: TypeAlias = Skip | Rename | UpdateOverwrite


@dataclass(frozen=True, slots=True, kw_only=True)
class PlanDraft:
    global_prefix: str | None = None
    pages: Mapping[PageId, DraftAction] = field(default_factory=dict["PageId", "DraftAction"])

    @property
    def prefix(self) -> str | None:
        if self.global_prefix is None:
            return None
        return self.global_prefix.strip().strip("/") or None


class PlanAction(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    RENAME = "rename"
    SKIP = "skip"


@dataclass(frozen=True, slots=True, kw_only=True)
class PlanEntry:
    page: PageId
    category: PreflightCategory
    action: PlanAction
    final_title: str | None = None
    backup: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class PlanSummary:
    create: int = 0
    update: int = 0
    rename: int = 0
    skip: int = 0
    backup: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "create": self.create,
            "update": self.update,
            "rename": self.rename,
            "skip": self.skip,
            "backup": self.backup,
        }


@dataclass(frozen=True, slots=True)
class TitleClash:
    """Several planned pages would be written to the same final title."""

    title: str
    pages: tuple[PageId, ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class Plan:
    entries: tuple[PlanEntry, ...]
    summary: PlanSummary
    unresolved_conflicts: tuple[PageId, ...] = ()
    title_clashes: tuple[TitleClash, ...] = ()

    def entry_for(self, page: PageId) -> PlanEntry | None:
        for entry in self.entries:
            if entry.page == page:
                return entry
        return None

    @property
    def final_titles(self) -> dict[PageId, str]:
        return {
            entry.page: entry.final_title
            for entry in self.entries
            if entry.final_title is not None
        }


def resolve_plan(
    preflight: PreflightResult,
    draft: PlanDraft | None = None,
    *,
    namespaces: Collection[str] = DEFAULT_NAMESPACES,
) -> Plan:
    """Compute the final title and action for every candidate page."""

    draft = draft or PlanDraft()
    unknown = set(draft.pages).difference(preflight.categories)
    if unknown:
        raise UnknownPageInDraftError(unknown)

    entries: list[PlanEntry] = []
    unresolved: list[PageId] = []
    for page, category in preflight.categories.items():
        entry = _plan_page(
            page,
            category,
            draft.pages.get(page),
            prefix=draft.prefix,
            namespaces=namespaces,
        )
        entries.append(entry)
        explicit_skip = isinstance(draft.pages.get(page), Skip)
        if category.is_conflict and entry.action is PlanAction.SKIP and not explicit_skip:
            unresolved.append(page)

    plan = Plan(
        entries=tuple(entries),
        summary=_summarize(entries),
        unresolved_conflicts=tuple(unresolved),
        title_clashes=_title_clashes(entries),
    )
    log.info("Plan summary: %s", plan.summary.as_dict())
    return plan


def _plan_page(
    page: PageId,
    category: PreflightCategory,
    action: DraftAction | None,
    *,
    prefix: str | None,
    namespaces: Collection[str],
) -> PlanEntry:
    if isinstance(action, Skip):
        return PlanEntry(page=page, category=category, action=PlanAction.SKIP)
    if isinstance(action, Rename):
        final_title = renamed_title(page, action.to, prefix, namespaces)
        if final_title != page:
            return PlanEntry(
                page=page,
                category=category,
                action=PlanAction.RENAME,
                final_title=final_title,
            )
        if category.is_conflict:
            log.info("Rename of %s maps back onto the colliding title", page)
            return PlanEntry(page=page, category=category, action=PlanAction.SKIP)
        return _default_entry(page, category, prefix=None, namespaces=namespaces)
    if isinstance(action, UpdateOverwrite):
        if category.is_conflict or category.is_update:
            # a conflict is overwritten in place; updates follow the prefix like any page
            final_title = (
                page if category.is_conflict else prefixed_title(page, prefix, namespaces)
            )
            return PlanEntry(
                page=page,
                category=category,
                action=PlanAction.UPDATE,
                final_title=final_title,
                backup=action.backup,
            )
        log.warning("Ignoring overwrite request for %s: the page does not exist yet", page)
    return _default_entry(page, category, prefix=prefix, namespaces=namespaces)


def _default_entry(
    page: PageId,
    category: PreflightCategory,
    *,
    prefix: str | None,
    namespaces: Collection[str],
) -> PlanEntry:
    final_title = prefixed_title(page, prefix, namespaces)
    if category.is_conflict:
        # a prefixed title side-steps the collision; otherwise skip by default
        if final_title == page:
            return PlanEntry(page=page, category=category, action=PlanAction.SKIP)
        return PlanEntry(
            page=page,
            category=category,
            action=PlanAction.RENAME,
            final_title=final_title,
        )
    action = PlanAction.UPDATE if category.is_update else PlanAction.CREATE
    return PlanEntry(page=page, category=category, action=action, final_title=final_title)


def _summarize(entries: list[PlanEntry]) -> PlanSummary:
    counts = dict.fromkeys(PlanAction, 0)
    for entry in entries:
        counts[entry.action] += 1
    return PlanSummary(
        create=counts[PlanAction.CREATE],
        update=counts[PlanAction.UPDATE],
        rename=counts[PlanAction.RENAME],
        skip=counts[PlanAction.SKIP],
        backup=sum(1 for entry in entries if entry.backup),
    )


def _title_clashes(entries: list[PlanEntry]) -> tuple[TitleClash, ...]:
    pages_by_title: dict[str, list[PageId]] = {}
    for entry in entries:
        if entry.final_title is not None:
            pages_by_title.setdefault(entry.final_title, []).append(entry.page)
    return tuple(
        TitleClash(title=title, pages=tuple(pages))
        for title, pages in pages_by_title.items()
        if len(pages) > 1
    )
