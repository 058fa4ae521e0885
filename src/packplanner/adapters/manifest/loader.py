"""Read manifest files (YAML or JSON) into catalogs."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import yaml
from pydantic import ValidationError

from .schema import ManifestDocument
from .translator import to_catalog

if TYPE_CHECKING:
    from pathlib import Path

    from packplanner.domain.model import Catalog

log = getLogger(__name__)

_BOM = "\ufeff"


class ManifestError(ValueError):
    """Raised when a manifest cannot be parsed or fails schema validation."""


def parse_manifest_document(text: str) -> ManifestDocument:
    trimmed = text.strip().removeprefix(_BOM).strip()
    if not trimmed:
        raise ManifestError("Empty manifest")

    try:
        # JSON documents are valid YAML, so one parser covers both formats
        raw = yaml.safe_load(trimmed)
    except yaml.YAMLError as exc:
        raise ManifestError(f"Invalid YAML: {exc}") from exc

    if not isinstance(raw, dict):
        raise ManifestError("Invalid manifest root: expected mapping")

    try:
        return ManifestDocument.model_validate(raw)
    except ValidationError as exc:
        raise ManifestError(f"Invalid manifest schema: {exc}") from exc


def parse_manifest(text: str) -> Catalog:
    document = parse_manifest_document(text)
    catalog = to_catalog(document)
    log.info(
        "Loaded manifest %r: schema=%s, packs=%s",
        catalog.name,
        catalog.schema_version,
        len(catalog.packs),
    )
    return catalog


def load_manifest(path: Path) -> Catalog:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Cannot read manifest {path}: {exc}") from exc
    return parse_manifest(text)
