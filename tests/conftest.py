from __future__ import annotations

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def _isolate_planner_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "PACKPLANNER_NAMESPACES",
        "PACKPLANNER_GLOBAL_PREFIX",
        "PACKPLANNER_LOG_LEVEL",
        "PACKPLANNER_CATALOG",
        "PACKPLANNER_INSTALLED",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def manifest_path() -> Path:
    return DATA_DIR / "manifest.yaml"
