from __future__ import annotations

from pathlib import Path

import pytest

from packplanner.config import MissingConfigurationError, get_source_config, require_env_vars


def test_require_env_vars_lists_missing_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PACKPLANNER_TEST_PRESENT", "value")
    monkeypatch.setenv("PACKPLANNER_TEST_BLANK", "  ")
    monkeypatch.delenv("PACKPLANNER_TEST_ABSENT", raising=False)

    with pytest.raises(
        MissingConfigurationError,
        match="PACKPLANNER_TEST_ABSENT, PACKPLANNER_TEST_BLANK",
    ) as exc:
        require_env_vars(
            ["PACKPLANNER_TEST_PRESENT", "PACKPLANNER_TEST_BLANK", "PACKPLANNER_TEST_ABSENT"]
        )

    assert exc.value.names == ("PACKPLANNER_TEST_ABSENT", "PACKPLANNER_TEST_BLANK")

    assert require_env_vars(["PACKPLANNER_TEST_PRESENT"]) == {"PACKPLANNER_TEST_PRESENT": "value"}


def test_get_source_config_requires_catalog() -> None:
    with pytest.raises(MissingConfigurationError, match="PACKPLANNER_CATALOG"):
        get_source_config()


def test_get_source_config_prefers_explicit_paths(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PACKPLANNER_CATALOG", "/env/manifest.yaml")
    monkeypatch.setenv("PACKPLANNER_INSTALLED", "/env/installed.json")

    config = get_source_config(catalog_path=Path("manifest.yaml"))

    assert config.catalog_path == Path("manifest.yaml")
    assert config.installed_path == Path("/env/installed.json")


def test_get_source_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PACKPLANNER_CATALOG", "/env/manifest.yaml")

    config = get_source_config()

    assert config.catalog_path == Path("/env/manifest.yaml")
    assert config.installed_path is None
