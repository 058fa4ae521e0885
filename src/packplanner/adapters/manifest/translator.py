"""Translate validated manifest documents into domain catalogs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from packplanner.domain.model import Catalog, Pack

if TYPE_CHECKING:
    from .schema import ManifestDocument, ManifestPack


def _to_pack(pack_id: str, meta: ManifestPack) -> Pack:
    return Pack(
        id=pack_id.strip(),
        version=meta.version or None,
        description=meta.description,
        depends_on=tuple(meta.depends_on),
        pages=tuple(meta.pages),
        tags=tuple(meta.tags),
    )


def to_catalog(document: ManifestDocument) -> Catalog:
    """Build a ``Catalog``; raises ``CatalogInconsistentError`` on dangling references."""

    return Catalog(
        packs=tuple(_to_pack(pack_id, meta) for pack_id, meta in document.packs.items()),
        schema_version=document.schema_version,
        name=document.name,
        description=document.description,
        author=document.author,
        last_updated=document.last_updated,
    )
