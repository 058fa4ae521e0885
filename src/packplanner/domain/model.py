"""Catalog primitives: packs, page references and derived edges.

Packs are immutable for the duration of one planning run. The catalog checks
referential integrity on construction so that every later stage can index by
id without guarding against dangling references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, TypeAlias

from .errors import CatalogInconsistentError

if TYPE_CHECKING:
    from collections.abc import Iterable

PackId: TypeAlias = str
PageId: TypeAlias = str


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True, slots=True, kw_only=True)
class Pack:
    """A named, versioned bundle of wiki pages."""

    id: PackId
    version: str | None = None
    description: str = ""
    depends_on: tuple[PackId, ...] = ()
    pages: tuple[PageId, ...] = ()
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "depends_on", _unique(self.depends_on))
        object.__setattr__(self, "pages", _unique(self.pages))
        object.__setattr__(self, "tags", tuple(self.tags))


class EdgeRelation(StrEnum):
    CONTAINS = "contains"
    DEPENDS = "depends"


@dataclass(frozen=True, slots=True)
class Edge:
    """Derived graph edge.

    ``CONTAINS`` edges point from a pack to one of its pages, ``DEPENDS`` edges
    from a pack to a pack it requires.
    """

    source: str
    target: str
    relation: EdgeRelation


@dataclass(frozen=True, slots=True, kw_only=True)
class Catalog:
    """Snapshot of every pack published by one manifest."""

    packs: tuple[Pack, ...]
    schema_version: str = ""
    name: str = ""
    description: str = ""
    author: str = ""
    last_updated: str = ""
    _packs_by_id: dict[PackId, Pack] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "packs", tuple(self.packs))
        packs_by_id: dict[PackId, Pack] = {}
        for pack in self.packs:
            if not pack.id.strip():
                raise CatalogInconsistentError(
                    "Pack id must not be empty", reference=pack.id, pack_id=pack.id
                )
            if pack.id in packs_by_id:
                raise CatalogInconsistentError(
                    f"Duplicate pack id in catalog: {pack.id}",
                    reference=pack.id,
                    pack_id=pack.id,
                )
            packs_by_id[pack.id] = pack
        object.__setattr__(self, "_packs_by_id", packs_by_id)
        self._validate_references()

    @property
    def pack_ids(self) -> tuple[PackId, ...]:
        return tuple(pack.id for pack in self.packs)

    @property
    def page_ids(self) -> tuple[PageId, ...]:
        return _unique(page for pack in self.packs for page in pack.pages)

    def pack_for(self, pack_id: PackId) -> Pack | None:
        return self._packs_by_id.get(pack_id)

    def __contains__(self, pack_id: object) -> bool:
        return pack_id in self._packs_by_id

    def _validate_references(self) -> None:
        for pack in self.packs:
            for dependency in pack.depends_on:
                if dependency not in self._packs_by_id:
                    raise CatalogInconsistentError(
                        f"Pack {pack.id!r} depends on unknown pack {dependency!r}",
                        reference=dependency,
                        pack_id=pack.id,
                    )
            for page in pack.pages:
                if not page.strip():
                    raise CatalogInconsistentError(
                        f"Pack {pack.id!r} declares an empty page identifier",
                        reference=page,
                        pack_id=pack.id,
                    )
