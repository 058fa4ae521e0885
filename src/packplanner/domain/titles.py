"""Wiki title helpers: namespace splitting and idempotent prefixing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection

# MediaWiki canonical namespaces plus the ones content packs commonly ship into
DEFAULT_NAMESPACES: tuple[str, ...] = (
    "Talk",
    "User",
    "User talk",
    "Project",
    "Project talk",
    "File",
    "File talk",
    "MediaWiki",
    "MediaWiki talk",
    "Template",
    "Template talk",
    "Help",
    "Help talk",
    "Category",
    "Category talk",
    "Module",
    "Module talk",
    "Form",
    "Property",
    "Concept",
)


@dataclass(frozen=True, slots=True)
class SplitTitle:
    namespace: str | None
    leaf: str

    def join(self) -> str:
        return f"{self.namespace}:{self.leaf}" if self.namespace else self.leaf


def split_title(title: str, namespaces: Collection[str]) -> SplitTitle:
    """Split off a recognised namespace prefix.

    Unrecognised prefixes stay part of the leaf, so ``"Lab:Notes"`` without a
    ``Lab`` namespace is a main-namespace title.
    """

    head, separator, tail = title.partition(":")
    namespace = _match_namespace(head, namespaces) if separator and tail else None
    if namespace is None:
        return SplitTitle(None, title)
    return SplitTitle(namespace, tail)


def _match_namespace(candidate: str, namespaces: Collection[str]) -> str | None:
    normalized = candidate.strip().replace("_", " ").casefold()
    for namespace in namespaces:
        if namespace.replace("_", " ").casefold() == normalized:
            return namespace
    return None


def apply_prefix(leaf: str, prefix: str | None) -> str:
    """Return ``<prefix>/<leaf>``, leaving already prefixed leaves untouched."""

    if not prefix:
        return leaf
    prefix = prefix.strip().strip("/")
    if not prefix or leaf.startswith(f"{prefix}/"):
        return leaf
    return f"{prefix}/{leaf}"


def prefixed_title(title: str, prefix: str | None, namespaces: Collection[str]) -> str:
    """Apply ``prefix`` to the leaf of ``title``, never to its namespace."""

    split = split_title(title, namespaces)
    return SplitTitle(split.namespace, apply_prefix(split.leaf, prefix)).join()


def renamed_title(
    original: str,
    rename_to: str,
    prefix: str | None,
    namespaces: Collection[str],
) -> str:
    """Build the final title for an explicit rename.

    The target keeps its own namespace when it names one; otherwise it
    inherits the namespace of ``original``. The prefix goes on the leaf.
    """

    target = split_title(rename_to.strip(), namespaces)
    namespace = target.namespace or split_title(original, namespaces).namespace
    return SplitTitle(namespace, apply_prefix(target.leaf, prefix)).join()
