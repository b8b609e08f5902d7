"""Custom exception hierarchy for pagelifecycle."""

from __future__ import annotations


class PageLifecycleError(Exception):
    """Base exception for all pagelifecycle errors."""


class PageLifecycleConfigError(PageLifecycleError):
    """Invalid or missing configuration."""


class MissingLifecycleContextError(PageLifecycleError):
    """A contributor call arrived without a live lifecycle handle.

    This always indicates a wiring mistake: the contributor was created
    outside of any :class:`pagelifecycle.emitter.PageLifecycle` scope, or
    the scope it was registered under has been removed.
    """

    def __init__(self, message: str | None = None, *, position: tuple[str, ...] | None = None) -> None:
        self.position = position
        super().__init__(
            message
            or "Page lifecycle context missing, ensure the contributor is given a PageLifecycle handle"
        )


class UnbalancedLoadError(PageLifecycleError):
    """``end_loading_data`` called with no outstanding ``begin_loading_data``.

    Only raised when ``LifecycleConfig.strict_load_balance`` is enabled;
    otherwise the imbalance is clamped and logged.
    """

    def __init__(self, message: str, *, imbalance_count: int = 0) -> None:
        self.imbalance_count = imbalance_count
        super().__init__(message)
