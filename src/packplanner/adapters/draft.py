"""Plan draft wire format.

A draft arrives as::

    {
      "global_prefix": "Lab",
      "pages": {
        "Template:Card": {"action": "rename", "rename_to": "Card (lab)"},
        "Main Page": {"action": "update", "backup": true},
        "Help:Intro": {"action": "skip"}
      }
    }

``backup`` is only accepted with ``update`` and ``rename_to`` only with
``rename``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from packplanner.domain.plan import PlanDraft, Rename, Skip, UpdateOverwrite

if TYPE_CHECKING:
    from pathlib import Path

    from packplanner.domain.plan import DraftAction


class DraftError(ValueError):
    """Raised when a plan draft is malformed."""


class DraftActionName(StrEnum):
    SKIP = "skip"
    RENAME = "rename"
    UPDATE = "update"


class DraftPageModel(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    action: DraftActionName
    rename_to: str | None = None
    backup: bool | None = None

    @model_validator(mode="after")
    def _check_combination(self) -> DraftPageModel:
        if self.action is DraftActionName.RENAME and not self.rename_to:
            raise ValueError("rename requires a non-empty rename_to")
        if self.action is not DraftActionName.RENAME and self.rename_to is not None:
            raise ValueError(f"rename_to is not allowed with action {self.action}")
        if self.action is not DraftActionName.UPDATE and self.backup is not None:
            raise ValueError(f"backup is not allowed with action {self.action}")
        return self

    def to_action(self) -> DraftAction:
        if self.action is DraftActionName.RENAME:
            return Rename(self.rename_to or "")
        if self.action is DraftActionName.UPDATE:
            return UpdateOverwrite(backup=bool(self.backup))
        return Skip()


class DraftDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    global_prefix: str | None = None
    pages: dict[str, DraftPageModel] = Field(default_factory=dict)

    def to_plan_draft(self, *, default_prefix: str | None = None) -> PlanDraft:
        prefix = self.global_prefix if self.global_prefix is not None else default_prefix
        return PlanDraft(
            global_prefix=prefix,
            pages={page: model.to_action() for page, model in self.pages.items()},
        )


def parse_plan_draft(text: str, *, default_prefix: str | None = None) -> PlanDraft:
    try:
        document = DraftDocument.model_validate_json(text)
    except ValidationError as exc:
        raise DraftError(f"Invalid plan draft: {exc}") from exc
    return document.to_plan_draft(default_prefix=default_prefix)


def load_plan_draft(path: Path, *, default_prefix: str | None = None) -> PlanDraft:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DraftError(f"Cannot read plan draft {path}: {exc}") from exc
    return parse_plan_draft(text, default_prefix=default_prefix)
