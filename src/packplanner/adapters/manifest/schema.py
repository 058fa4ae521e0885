"""Manifest document schemas.

Per-pack entries are strict: unknown keys are rejected so that a typo such as
``depend_on`` fails loudly instead of silently dropping a dependency. Unknown
top-level keys are tolerated and logged once per key.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

log = logging.getLogger(__name__)

SCHEMA_VERSION_PATTERN = r"^v?\d+(\.\d+)?(\.\d+)?$"


def _scalar_to_str(value: object) -> object:
    # YAML turns unquoted 1.0 or 2025-01-01 into numbers and dates
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, datetime | date):
        return value.isoformat()
    return value


class ManifestPack(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    version: str
    description: str = ""
    pages: list[str] = Field(default_factory=list)
    depends_on: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: object) -> object:
        return _scalar_to_str(value)

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("pages", "depends_on", "tags", mode="before")
    @classmethod
    def _coerce_list(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("pages", "depends_on", "tags")
    @classmethod
    def _reject_blank_entries(cls, values: list[str]) -> list[str]:
        if any(not value for value in values):
            raise ValueError("entries must be non-empty strings")
        return values


class ManifestDocument(BaseModel):
    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)
    # shared by every parse in the process: each unmodeled key warns once
    _logged_extra_keys: ClassVar[set[str]] = set()

    schema_version: str = Field(pattern=SCHEMA_VERSION_PATTERN)
    packs: dict[str, ManifestPack]
    name: str = ""
    description: str = ""
    author: str = ""
    last_updated: str = ""

    @field_validator("schema_version", "last_updated", mode="before")
    @classmethod
    def _coerce_scalars(cls, value: object) -> object:
        return _scalar_to_str(value)

    @field_validator("packs")
    @classmethod
    def _reject_blank_pack_ids(cls, packs: dict[str, ManifestPack]) -> dict[str, ManifestPack]:
        if any(not pack_id.strip() for pack_id in packs):
            raise ValueError("pack ids must be non-empty strings")
        return packs

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning("Manifest: unmodeled keys: %s", ", ".join(sorted(new_keys)))
