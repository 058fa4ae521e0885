from __future__ import annotations

import pytest

from packplanner.domain.errors import CatalogInconsistentError
from packplanner.domain.graph import build_graph
from packplanner.domain.selection import SelectionConflict, check_deselection, resolve_selection
from tests.helpers.catalogs import chain_catalog, cyclic_catalog, make_catalog, make_pack


def test_selection_closure_locks_dependencies() -> None:
    graph = build_graph(chain_catalog())

    result = resolve_selection(graph, {"C"})

    assert result.explicit == frozenset({"C"})
    assert result.closure == frozenset({"A", "B", "C"})
    assert result.locks == {"A": "required by C", "B": "required by C"}
    assert result.candidate_pages == ("A1", "B1", "C1")
    assert result.selection_conflicts == ()


def test_selection_lock_reason_names_first_requester() -> None:
    graph = build_graph(chain_catalog())

    result = resolve_selection(graph, ["C", "B"])

    assert result.locks == {"A": "required by B"}
    assert result.locked == frozenset({"A"})


def test_selection_is_idempotent() -> None:
    graph = build_graph(chain_catalog())

    first = resolve_selection(graph, {"C"})
    second = resolve_selection(graph, first.closure)

    assert second.closure == first.closure
    assert resolve_selection(graph, {"C"}) == first


def test_selection_of_nothing_is_empty() -> None:
    result = resolve_selection(build_graph(chain_catalog()), [])

    assert result.closure == frozenset()
    assert result.locks == {}
    assert result.page_owners == {}


def test_selection_terminates_on_cycle() -> None:
    result = resolve_selection(build_graph(cyclic_catalog()), {"A"})

    assert result.closure == frozenset({"A", "B", "C"})
    assert result.locks == {"B": "required by A", "C": "required by A"}


def test_selection_rejects_unknown_pack() -> None:
    graph = build_graph(chain_catalog())

    with pytest.raises(CatalogInconsistentError, match="not in the catalog: Z") as exc:
        resolve_selection(graph, {"A", "Z"})

    assert exc.value.reference == "Z"


def test_selection_reports_shared_pages_as_conflicts() -> None:
    catalog = make_catalog(
        make_pack("base", pages=("Template:Card", "Form:Person")),
        make_pack("equipment", depends_on=("base",), pages=("Equipment", "Template:Card")),
    )

    result = resolve_selection(build_graph(catalog), {"equipment"})

    assert result.page_owners["Template:Card"] == ("base", "equipment")
    assert result.selection_conflicts == (
        SelectionConflict(page="Template:Card", owners=("base", "equipment")),
    )
    assert result.is_conflicted("Template:Card")
    assert result.owner_for("Template:Card") is None
    assert result.owner_for("Equipment") == "equipment"


def test_deselection_blocked_by_requiring_pack() -> None:
    graph = build_graph(chain_catalog())
    selection = resolve_selection(graph, {"A", "C"})

    check = check_deselection(graph, selection, "A")

    assert not check.allowed
    assert check.required_by == ("C",)
    assert check_deselection(graph, selection, "C").allowed
