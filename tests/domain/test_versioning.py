from __future__ import annotations

import pytest

from packplanner.domain.graph import build_graph
from packplanner.domain.model import Pack
from packplanner.domain.selection import resolve_selection
from packplanner.domain.versioning import (
    DependencyUpdate,
    UpdateAction,
    Version,
    compare_versions,
    compute_update_paths,
    detect_version_conflicts,
    format_version,
    parse_version,
    same_major,
)
from tests.helpers.catalogs import make_catalog, make_pack


@pytest.mark.parametrize("value", [None, "", "   "])
def test_parse_version_defaults_to_zero(value: str | None) -> None:
    assert parse_version(value) == Version(0, 0, 0)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("1", (1, 0, 0)),
        ("1.2", (1, 2, 0)),
        ("v1.2.3", (1, 2, 3)),
        ("V1.2.3", (1, 2, 3)),
        ("1.2.3-rc.1", (1, 2, 3)),
        ("1.2.3+build.5", (1, 2, 3)),
        ("v1.2.3-rc.1+build.5", (1, 2, 3)),
        ("01.02.03", (1, 2, 3)),
        ("1.2.3beta", (1, 2, 3)),
        ("1.x.x", (1, 0, 0)),
        ("  v1.2.3-alpha  ", (1, 2, 3)),
    ],
)
def test_parse_version_normalizes_loose_input(value: str, expected: tuple[int, int, int]) -> None:
    assert parse_version(value) == expected


@pytest.mark.parametrize("value", ["1.2.3", "0.0.1", "10.20.30"])
def test_format_round_trips_canonical_versions(value: str) -> None:
    assert format_version(parse_version(value)) == value


def test_compare_versions_orders_by_triple() -> None:
    assert compare_versions("1.2.3", "1.2.4") < 0
    assert compare_versions("2.0.0-rc.1", "1.9.9") > 0
    assert compare_versions("1.2.3-alpha", "1.2.3+build") == 0
    assert compare_versions(None, "1.0.0") < 0
    assert compare_versions(None, None) == 0


def test_same_major_compares_first_component_only() -> None:
    assert same_major("1.0.0", "1.9.9")
    assert same_major(None, "0.1.0")
    assert not same_major("0.9.9", "1.0.0")


def test_compute_update_paths_classifies_installed_packs() -> None:
    catalog = make_catalog(
        make_pack("newer", version="1.1.0"),
        make_pack("same", version="1.0.0"),
        make_pack("older", version="0.9.0"),
        Pack(id="unversioned", version=None),
    )

    paths = compute_update_paths(
        catalog,
        {
            "newer": "1.0.0",
            "same": "v1.0.0",
            "older": "1.0.0",
            "unversioned": "1.0.0",
            "gone": "3.0.0",
        },
    )

    assert paths["newer"].action is UpdateAction.UPDATE
    assert paths["newer"].available == "1.1.0"
    assert paths["same"].action is UpdateAction.CURRENT
    assert paths["older"].action is UpdateAction.DOWNGRADE
    assert paths["unversioned"].action is UpdateAction.UNKNOWN
    assert paths["gone"].action is UpdateAction.ORPHANED
    assert paths["gone"].available is None


def _dependency_updates(explicit: set[str], installed: dict[str, str | None]):
    catalog = make_catalog(
        make_pack("Base", version="2.0.0"),
        make_pack("Extra", version="1.0.0"),
        make_pack("App", depends_on=("Base", "Extra")),
        make_pack("Plugin", depends_on=("App",), version="1.0.0"),
    )
    graph = build_graph(catalog)
    return detect_version_conflicts(graph, resolve_selection(graph, explicit), installed)


def test_detect_version_conflicts_flags_outdated_dependency() -> None:
    updates = _dependency_updates({"App"}, {"Base": "1.4.0"})

    assert updates == (
        DependencyUpdate(
            pack="Base",
            required_by="App",
            current_version="1.4.0",
            required_version="2.0.0",
        ),
    )
    assert updates[0].message == "Base will be updated from 1.4.0 to 2.0.0 (required by App)"


def test_detect_version_conflicts_ignores_current_and_missing_dependencies() -> None:
    assert _dependency_updates({"App"}, {"Base": "2.0.0", "Extra": None}) == ()
    assert _dependency_updates({"App"}, {"Base": "v2.1", "Extra": "1.0"}) == ()


def test_detect_version_conflicts_only_checks_explicit_packs() -> None:
    # App is pulled in by Plugin; its own dependencies are not checked
    updates = _dependency_updates({"Plugin"}, {"Base": "1.0.0", "App": "0.5.0"})

    assert [(update.pack, update.required_by) for update in updates] == [("App", "Plugin")]
