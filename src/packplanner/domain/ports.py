"""Ports for the collaborators that feed the planning engine.

The engine itself never calls these; application services use them to gather
the catalog and the installed-state snapshot before a planning run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .model import Catalog, PackId, PageId
    from .preflight import PackState, PageState


@runtime_checkable
class ManifestSource(Protocol):
    """Fetch and validate the catalog published at ``repo``/``ref``."""

    def fetch(self, repo: str, ref: str) -> Catalog: ...


@runtime_checkable
class InstalledRegistry(Protocol):
    """Read-only view of what is currently installed in the wiki."""

    def lookup(self, page: PageId) -> PageState: ...

    def lookup_pack(self, pack_id: PackId) -> PackState: ...
