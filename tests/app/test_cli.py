from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from packplanner.ui.cli import main

if TYPE_CHECKING:
    from pathlib import Path


def _write_json(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_graph_command_prints_summary_and_tree(
    manifest_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    main(["--catalog", str(manifest_path), "graph"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["graph_summary"]["roots"] == ["onboarding", "equipment"]
    assert payload["graph_summary"]["has_cycle"] is False
    assert [node["id"] for node in payload["hierarchy_tree"]["tree"]] == [
        "onboarding",
        "equipment",
    ]


def test_plan_command_reports_locks_and_conflicts(
    manifest_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    main(["--catalog", str(manifest_path), "plan", "equipment"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["selection_result"]["closure"] == ["base", "equipment"]
    assert payload["selection_result"]["locks"] == {"base": "required by equipment"}
    assert payload["preflight_result"]["pages"]["Template:Card"] == "pack_pack_conflict"
    assert payload["plan"]["unresolved_conflicts"] == ["Template:Card"]


def test_plan_command_applies_installed_state_and_draft(
    manifest_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    installed = _write_json(
        tmp_path / "installed.json",
        {
            "pages": {
                "Template:Card": {"owning_pack": "base", "installed_version": "1.0.0"},
                "MainPage": {"owning_pack": None},
            },
            "packs": {"base": {"installed_version": "1.0.0"}},
        },
    )
    draft = _write_json(
        tmp_path / "draft.json",
        {"pages": {"MainPage": {"action": "rename", "rename_to": "Welcome"}}},
    )

    main(
        [
            "--catalog",
            str(manifest_path),
            "plan",
            "onboarding",
            "--installed",
            str(installed),
            "--draft",
            str(draft),
        ]
    )

    payload = json.loads(capsys.readouterr().out)
    pages = {entry["page"]: entry for entry in payload["plan"]["pages"]}
    assert pages["Template:Card"]["action"] == "update"
    assert pages["Template:Card"]["category"] == "update_unchanged"
    assert pages["MainPage"]["category"] == "external_collision"
    assert pages["MainPage"]["action"] == "rename"
    assert pages["MainPage"]["final_title"] == "Welcome"
    assert pages["SubPage"]["action"] == "create"
    assert payload["plan"]["unresolved_conflicts"] == []


def test_plan_command_uses_prefix_from_environment(
    manifest_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("PACKPLANNER_CATALOG", str(manifest_path))
    monkeypatch.setenv("PACKPLANNER_GLOBAL_PREFIX", "Lab")

    main(["plan", "base"])

    payload = json.loads(capsys.readouterr().out)
    titles = {entry["page"]: entry["final_title"] for entry in payload["plan"]["pages"]}
    assert titles == {"Template:Card": "Template:Lab/Card", "Form:Person": "Form:Lab/Person"}


def test_updates_command(
    manifest_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    installed = _write_json(
        tmp_path / "installed.json",
        {"packs": {"base": {"installed_version": "0.9.0"}, "retired": {"installed_version": "1"}}},
    )

    main(["--catalog", str(manifest_path), "updates", "--installed", str(installed)])

    payload = json.loads(capsys.readouterr().out)
    assert payload["base"]["action"] == "update"
    assert payload["base"]["available"] == "1.0.0"
    assert payload["retired"]["action"] == "orphaned"


def test_missing_catalog_exits_with_input_error() -> None:
    with pytest.raises(SystemExit) as exc:
        main(["graph"])

    assert exc.value.code == 2


def test_updates_without_installed_state_exits_with_input_error(manifest_path: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--catalog", str(manifest_path), "updates"])

    assert exc.value.code == 2


def test_invalid_draft_exits_with_input_error(manifest_path: Path, tmp_path: Path) -> None:
    draft = _write_json(tmp_path / "draft.json", {"pages": {"MainPage": {"action": "rename"}}})

    with pytest.raises(SystemExit) as exc:
        main(["--catalog", str(manifest_path), "plan", "onboarding", "--draft", str(draft)])

    assert exc.value.code == 2


def test_unknown_pack_exits_with_planning_error(manifest_path: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--catalog", str(manifest_path), "plan", "ghost"])

    assert exc.value.code == 1


def test_draft_for_page_outside_selection_exits_with_planning_error(
    manifest_path: Path, tmp_path: Path
) -> None:
    draft = _write_json(tmp_path / "draft.json", {"pages": {"Equipment": {"action": "skip"}}})

    with pytest.raises(SystemExit) as exc:
        main(["--catalog", str(manifest_path), "plan", "onboarding", "--draft", str(draft)])

    assert exc.value.code == 1
