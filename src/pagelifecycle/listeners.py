"""Subscriber arena for derived-state listeners."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_subscription_ids = itertools.count(1)


@dataclass(frozen=True, eq=False)
class Subscription:
    """Handle returned by :meth:`CallbackArena.add`; pass it back to remove."""

    topic: str
    id: int = field(default_factory=lambda: next(_subscription_ids))


class CallbackArena(Generic[T]):
    """Callbacks keyed by stable subscription handles.

    Dispatch iterates over a snapshot of the handles and skips any that were
    removed in the meantime, so listeners may unsubscribe themselves (or
    each other) while a dispatch is in progress.
    """

    def __init__(self, topic: str, *, logger: logging.Logger | None = None) -> None:
        self._topic = topic
        self._callbacks: dict[Subscription, Callable[[T], Any]] = {}
        self._logger = logger or _logger

    def __len__(self) -> int:
        return len(self._callbacks)

    def add(self, callback: Callable[[T], Any]) -> Subscription:
        subscription = Subscription(self._topic)
        self._callbacks[subscription] = callback
        return subscription

    def remove(self, subscription: Subscription) -> bool:
        return self._callbacks.pop(subscription, None) is not None

    def dispatch(self, value: T) -> None:
        for subscription in list(self._callbacks):
            callback = self._callbacks.get(subscription)
            if callback is None:
                continue
            try:
                callback(value)
            except Exception:
                self._logger.debug("%s listener failed", self._topic, exc_info=True)
