"""Loose semantic version handling for pack update decisions.

Only ``major.minor.patch`` participates in ordering. Pre-release and build
suffixes are dropped entirely, so ``1.2.3-rc.1`` and ``1.2.3+build`` compare
equal to ``1.2.3``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .graph import PackGraph
    from .model import Catalog, PackId
    from .selection import SelectionResult

_LEADING_DIGITS = re.compile(r"^\d+")
_SUFFIX = re.compile(r"[-+]")


class Version(NamedTuple):
    major: int = 0
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return format_version(self)


def _component(raw: str) -> int:
    match = _LEADING_DIGITS.match(raw.strip())
    return int(match.group()) if match else 0


def parse_version(value: str | None) -> Version:
    """Parse ``value`` into a ``Version``; missing components default to 0."""

    if value is None:
        return Version()
    text = value.strip()
    if not text:
        return Version()
    if text[0] in "vV":
        text = text[1:]
    text = _SUFFIX.split(text, maxsplit=1)[0]
    parts = text.split(".")
    components = [_component(part) for part in parts[:3]]
    return Version(*components)


def format_version(version: Version) -> str:
    return f"{version.major}.{version.minor}.{version.patch}"


def compare_versions(a: str | None, b: str | None) -> int:
    """Return -1, 0 or 1 as ``a`` is older than, equal to or newer than ``b``."""

    left = parse_version(a)
    right = parse_version(b)
    return (left > right) - (left < right)


def same_major(a: str | None, b: str | None) -> bool:
    return parse_version(a).major == parse_version(b).major


class UpdateAction(StrEnum):
    UPDATE = "update"
    CURRENT = "current"
    DOWNGRADE = "downgrade"
    ORPHANED = "orphaned"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdatePath:
    """Update status of one installed pack against the catalog."""

    pack_id: PackId
    action: UpdateAction
    current: str | None
    available: str | None = None
    message: str | None = None


def compute_update_paths(
    catalog: Catalog,
    installed_versions: Mapping[PackId, str | None],
) -> dict[PackId, UpdatePath]:
    """Compare installed pack versions with the versions the catalog offers."""

    paths: dict[PackId, UpdatePath] = {}
    for pack_id in sorted(installed_versions):
        current = installed_versions[pack_id]
        pack = catalog.pack_for(pack_id)
        if pack is None:
            paths[pack_id] = UpdatePath(
                pack_id=pack_id,
                action=UpdateAction.ORPHANED,
                current=current,
                message="Pack no longer exists in manifest",
            )
            continue
        if not pack.version:
            paths[pack_id] = UpdatePath(
                pack_id=pack_id,
                action=UpdateAction.UNKNOWN,
                current=current,
                message="Manifest version missing",
            )
            continue

        comparison = compare_versions(current, pack.version)
        if comparison < 0:
            action, message = UpdateAction.UPDATE, None
        elif comparison > 0:
            action, message = UpdateAction.DOWNGRADE, "Installed version is newer than manifest"
        else:
            action, message = UpdateAction.CURRENT, None
        paths[pack_id] = UpdatePath(
            pack_id=pack_id,
            action=action,
            current=current,
            available=pack.version,
            message=message,
        )
    return paths


@dataclass(frozen=True, slots=True, kw_only=True)
class DependencyUpdate:
    """An installed dependency that a selected pack would pull up to a newer version."""

    pack: PackId
    required_by: PackId
    current_version: str
    required_version: str

    @property
    def message(self) -> str:
        return (
            f"{self.pack} will be updated from {self.current_version} to "
            f"{self.required_version} (required by {self.required_by})"
        )


def detect_version_conflicts(
    graph: PackGraph,
    selection: SelectionResult,
    installed_versions: Mapping[PackId, str | None],
) -> tuple[DependencyUpdate, ...]:
    """Flag direct dependencies of explicitly selected packs that are installed but outdated."""

    updates: list[DependencyUpdate] = []
    for pack_id in sorted(selection.explicit):
        for dependency in graph.dependencies_of(pack_id):
            current = installed_versions.get(dependency)
            pack = graph.pack_for(dependency)
            if current is None or pack is None or not pack.version:
                continue
            if compare_versions(current, pack.version) < 0:
                updates.append(
                    DependencyUpdate(
                        pack=dependency,
                        required_by=pack_id,
                        current_version=current,
                        required_version=pack.version,
                    )
                )
    return tuple(updates)
