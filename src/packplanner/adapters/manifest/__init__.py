"""Public interface for the manifest adapter."""

from __future__ import annotations

from .loader import ManifestError, load_manifest, parse_manifest, parse_manifest_document
from .schema import ManifestDocument, ManifestPack
from .translator import to_catalog

__all__ = [
    "ManifestDocument",
    "ManifestError",
    "ManifestPack",
    "load_manifest",
    "parse_manifest",
    "parse_manifest_document",
    "to_catalog",
]
