"""Errors raised by the planning engine.

Only two conditions abort a planning run: an inconsistent catalog and a draft
that references pages outside the current preflight. Cycles, locks and
conflicts are reported as data, never raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class PlanningError(Exception):
    """Base class for planning engine errors."""


class CatalogInconsistentError(PlanningError, ValueError):
    """Raised when a catalog references an id it does not define."""

    def __init__(self, message: str, *, reference: str, pack_id: str | None = None) -> None:
        self.reference = reference
        self.pack_id = pack_id
        super().__init__(message)


class UnknownPageInDraftError(PlanningError, KeyError):
    """Raised when a plan draft names pages that are not plan candidates."""

    def __init__(self, pages: Iterable[str]) -> None:
        self.pages = tuple(sorted(pages))
        super().__init__(f"Draft references unknown pages: {', '.join(self.pages)}")

    def __str__(self) -> str:
        # KeyError would quote the message otherwise
        return str(self.args[0])


class DependencyCycleError(PlanningError):
    """Raised by callers that need an install order on a cyclic graph."""

    def __init__(self, packs: Iterable[str]) -> None:
        self.packs = tuple(sorted(packs))
        super().__init__(f"Dependency cycle between packs: {', '.join(self.packs)}")
