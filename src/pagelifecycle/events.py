"""Lifecycle events and derived page state.

The emitter is the only component allowed to build
:class:`PageLifecycleEvent` instances; everything else reads them.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class LifecycleEventType(StrEnum):
    STARTED = "page-load-started"
    FAILED = "page-load-failed"
    COMPLETE = "page-load-complete"

    @property
    def is_terminal(self) -> bool:
        return self is not LifecycleEventType.STARTED


class LoadingState(StrEnum):
    LOADING = "loading"
    LOADED = "loaded"


class Location(BaseModel):
    """A navigation location as handed over by the host router.

    Any equality-comparable value may be used as a location; this model is
    a convenience for hosts that do not have one of their own.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    pathname: str = "/"
    search: str = ""
    hash: str = ""
    key: str | None = None
    state: Any = None

    @field_validator("pathname")
    @classmethod
    def _ensure_leading_slash(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            value = f"/{value}"
        return value

    @classmethod
    def parse(cls, url: str, *, key: str | None = None, state: Any = None) -> Location:
        """Build a location from a path or URL (``/foo?x=1#top``)."""
        parts = urlsplit(url)
        return cls(
            pathname=parts.path or "/",
            search=f"?{parts.query}" if parts.query else "",
            hash=f"#{parts.fragment}" if parts.fragment else "",
            key=key,
            state=state,
        )

    def __str__(self) -> str:
        return f"{self.pathname}{self.search}{self.hash}"


class PageLifecycleEvent(BaseModel):
    """A single entry of the public lifecycle event stream."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    type: LifecycleEventType
    time_stamp: int = Field(..., description="Epoch milliseconds at emission")
    originator: str
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def location(self) -> Any:
        return self.payload.get("location")

    @property
    def error(self) -> str | None:
        return self.payload.get("error")

    def to_wire(self) -> dict[str, Any]:
        """Dump with camelCase keys (``timeStamp``) for telemetry sinks."""
        dumped = self.model_dump(by_alias=True)
        dumped["type"] = self.type.value
        dumped["payload"] = {
            key: value.model_dump() if isinstance(value, BaseModel) else value
            for key, value in self.payload.items()
        }
        return dumped


class LifecycleState(BaseModel):
    """Read-only view of the current page, handed to state listeners."""

    model_config = ConfigDict(frozen=True)

    current_page_state: LoadingState
    current_page_location: Any = None
