"""Lifecycle configuration for pagelifecycle."""

from __future__ import annotations

import dataclasses
import os
from enum import StrEnum
from typing import Any

from pagelifecycle.exceptions import PageLifecycleConfigError

#: Originator tag stamped on every emitted event unless overridden.
DEFAULT_ORIGINATOR = "PageEvents"


class LocationMatch(StrEnum):
    """How two observed locations are compared for a transition."""

    VALUE = "value"
    IDENTITY = "identity"
    PATHNAME = "pathname"


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class LifecycleConfig:
    """Page lifecycle configuration.

    Parameters
    ----------
    originator : str
        Tag written to the ``originator`` field of every event.
    location_match : LocationMatch
        Equality policy used by the route tracker. ``value`` compares with
        ``==``, ``identity`` with ``is``, ``pathname`` compares only the
        ``pathname`` attribute (or the value itself for plain strings).
    recheck_on_metadata_update : bool
        When enabled, updating a metadata slot runs the same completion
        check as ``end_loading_data``.
    strict_load_balance : bool
        Raise :class:`~pagelifecycle.exceptions.UnbalancedLoadError` instead
        of clamping when ``end_loading_data`` has no matching begin.
    trace_enabled : bool
        Emit debug logs for every listener dispatch.
    """

    originator: str = DEFAULT_ORIGINATOR
    location_match: LocationMatch = LocationMatch.VALUE
    recheck_on_metadata_update: bool = False
    strict_load_balance: bool = False
    trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.originator, str) or not self.originator.strip():
            raise PageLifecycleConfigError("originator must be a non-empty string")
        try:
            match = LocationMatch(self.location_match)
        except ValueError as exc:
            raise PageLifecycleConfigError(f"Unknown location_match: {self.location_match!r}") from exc
        # Frozen dataclass: normalise plain strings to the enum member.
        object.__setattr__(self, "location_match", match)

    @classmethod
    def from_env(cls, **overrides: Any) -> LifecycleConfig:
        """Create configuration from environment variables.

        Reads the optional ``PAGELIFECYCLE_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        LifecycleConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        originator = env.get("PAGELIFECYCLE_ORIGINATOR")
        if originator is not None:
            config_kwargs["originator"] = originator

        match = env.get("PAGELIFECYCLE_LOCATION_MATCH")
        if match is not None:
            config_kwargs["location_match"] = match.strip().lower()

        _ENV_BOOL_MAP = {
            "PAGELIFECYCLE_RECHECK_ON_METADATA_UPDATE": "recheck_on_metadata_update",
            "PAGELIFECYCLE_STRICT_LOAD_BALANCE": "strict_load_balance",
            "PAGELIFECYCLE_TRACE_ENABLED": "trace_enabled",
        }
        for env_key, field_name in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
