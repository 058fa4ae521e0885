"""Installed-state registry backed by a JSON export.

Expected shape::

    {
      "pages": {"Template:Card": {"exists": true, "owning_pack": "core",
                                  "installed_version": "1.0.0"}},
      "packs": {"core": {"installed_version": "1.0.0"}}
    }

Pages and packs missing from the export are reported as not installed.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from packplanner.domain.preflight import InstalledSnapshot, PackState, PageState

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from packplanner.domain.model import PackId, PageId
    from packplanner.domain.ports import InstalledRegistry

log = getLogger(__name__)


class InstalledStateError(ValueError):
    """Raised when an installed-state export cannot be read."""


class InstalledPageModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    exists: bool = True
    owning_pack: str | None = None
    installed_version: str | None = None
    content_modified: bool = False


class InstalledPackModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    installed_version: str | None = None


class InstalledStateDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pages: dict[str, InstalledPageModel] = Field(default_factory=dict)
    packs: dict[str, InstalledPackModel] = Field(default_factory=dict)


class JsonInstalledRegistry:
    """``InstalledRegistry`` implementation over a parsed export."""

    def __init__(self, document: InstalledStateDocument) -> None:
        self._document = document

    @classmethod
    def from_json(cls, text: str) -> JsonInstalledRegistry:
        try:
            return cls(InstalledStateDocument.model_validate_json(text))
        except ValidationError as exc:
            raise InstalledStateError(f"Invalid installed-state export: {exc}") from exc

    @classmethod
    def from_path(cls, path: Path) -> JsonInstalledRegistry:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InstalledStateError(f"Cannot read installed state {path}: {exc}") from exc
        return cls.from_json(text)

    def lookup(self, page: PageId) -> PageState:
        model = self._document.pages.get(page)
        if model is None:
            return PageState()
        return PageState(
            exists=model.exists,
            owning_pack=model.owning_pack,
            installed_version=model.installed_version,
            content_modified=model.content_modified,
        )

    def lookup_pack(self, pack_id: PackId) -> PackState:
        model = self._document.packs.get(pack_id)
        if model is None:
            return PackState()
        return PackState(installed_version=model.installed_version)

    def installed_pack_versions(self) -> dict[PackId, str | None]:
        return {
            pack_id: model.installed_version for pack_id, model in self._document.packs.items()
        }


def capture_snapshot(
    registry: InstalledRegistry,
    *,
    pages: Iterable[PageId],
    packs: Iterable[PackId],
) -> InstalledSnapshot:
    """Freeze the registry state of ``pages`` and ``packs`` for one planning run."""

    page_states = {page: registry.lookup(page) for page in pages}
    pack_states = {pack_id: registry.lookup_pack(pack_id) for pack_id in packs}
    log.debug(
        "Captured installed snapshot: pages=%s (existing=%s), packs=%s",
        len(page_states),
        sum(1 for state in page_states.values() if state.exists),
        len(pack_states),
    )
    return InstalledSnapshot(pages=page_states, packs=pack_states)
