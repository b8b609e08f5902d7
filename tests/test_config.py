from __future__ import annotations

import pytest

from pagelifecycle.config import DEFAULT_ORIGINATOR, LifecycleConfig, LocationMatch
from pagelifecycle.exceptions import PageLifecycleConfigError


def test_defaults() -> None:
    config = LifecycleConfig()

    assert config.originator == DEFAULT_ORIGINATOR
    assert config.location_match is LocationMatch.VALUE
    assert config.recheck_on_metadata_update is False
    assert config.strict_load_balance is False
    assert config.trace_enabled is False


def test_location_match_accepts_strings() -> None:
    assert LifecycleConfig(location_match="pathname").location_match is LocationMatch.PATHNAME  # type: ignore[arg-type]


def test_invalid_values_raise_config_error() -> None:
    with pytest.raises(PageLifecycleConfigError):
        LifecycleConfig(location_match="fuzzy")  # type: ignore[arg-type]
    with pytest.raises(PageLifecycleConfigError):
        LifecycleConfig(originator="  ")


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAGELIFECYCLE_ORIGINATOR", "Storefront")
    monkeypatch.setenv("PAGELIFECYCLE_LOCATION_MATCH", "Identity")
    monkeypatch.setenv("PAGELIFECYCLE_STRICT_LOAD_BALANCE", "yes")
    monkeypatch.setenv("PAGELIFECYCLE_TRACE_ENABLED", "1")
    monkeypatch.delenv("PAGELIFECYCLE_RECHECK_ON_METADATA_UPDATE", raising=False)

    config = LifecycleConfig.from_env()

    assert config.originator == "Storefront"
    assert config.location_match is LocationMatch.IDENTITY
    assert config.strict_load_balance is True
    assert config.trace_enabled is True
    assert config.recheck_on_metadata_update is False


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAGELIFECYCLE_ORIGINATOR", "Storefront")
    monkeypatch.setenv("PAGELIFECYCLE_RECHECK_ON_METADATA_UPDATE", "true")

    config = LifecycleConfig.from_env(originator="Checkout", recheck_on_metadata_update=False)

    assert config.originator == "Checkout"
    assert config.recheck_on_metadata_update is False
