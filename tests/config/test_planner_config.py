from __future__ import annotations

import logging

import pytest

from packplanner.config import ConfigurationError, PlannerConfig, get_planner_config
from packplanner.domain.titles import DEFAULT_NAMESPACES


def test_get_planner_config_defaults() -> None:
    assert get_planner_config() == PlannerConfig(
        namespaces=DEFAULT_NAMESPACES,
        default_global_prefix=None,
        log_level=logging.INFO,
    )


def test_get_planner_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PACKPLANNER_NAMESPACES", "Template, Form ,Lab,Template")
    monkeypatch.setenv("PACKPLANNER_GLOBAL_PREFIX", "  Lab  ")
    monkeypatch.setenv("PACKPLANNER_LOG_LEVEL", "debug")

    config = get_planner_config()

    assert config.namespaces == ("Template", "Form", "Lab")
    assert config.default_global_prefix == "Lab"
    assert config.log_level == logging.DEBUG


def test_blank_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PACKPLANNER_NAMESPACES", "   ")
    monkeypatch.setenv("PACKPLANNER_GLOBAL_PREFIX", "")

    config = get_planner_config()

    assert config.namespaces == DEFAULT_NAMESPACES
    assert config.default_global_prefix is None


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("PACKPLANNER_NAMESPACES", ", ,", "at least one namespace"),
        ("PACKPLANNER_NAMESPACES", "Template,Bad:Name", "must not contain ':'"),
        ("PACKPLANNER_LOG_LEVEL", "chatty", "Unknown log level"),
    ],
)
def test_get_planner_config_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str, message: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=message) as exc:
        get_planner_config()

    assert exc.value.variable == name
