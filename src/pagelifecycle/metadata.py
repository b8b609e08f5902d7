"""Metadata aggregator: page properties contributed by mounted components."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping
from typing import Any

_logger = logging.getLogger(__name__)

_slot_ids = itertools.count(1)


def _as_bag(contents: Mapping[Any, Any] | None) -> dict[str, Any]:
    # Event payloads are keyed by strings; normalise on arrival.
    return {str(key): value for key, value in (contents or {}).items()}


class SlotKey:
    """Opaque handle for one registered metadata slot.

    Compared by identity only; the label is for logs.
    """

    __slots__ = ("_id", "label")

    def __init__(self, label: str | None = None) -> None:
        self._id = next(_slot_ids)
        self.label = label

    def __repr__(self) -> str:
        suffix = f" {self.label!r}" if self.label else ""
        return f"<SlotKey #{self._id}{suffix}>"


class MetadataRegistry:
    """Insertion-ordered mapping of slot handles to their current contents.

    ``merge`` is evaluated on demand and never cached, so an emission always
    sees the latest contents of every slot that is registered at that time.
    """

    def __init__(self) -> None:
        self._slots: dict[SlotKey, dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, key: object) -> bool:
        return key in self._slots

    def register(
        self,
        contents: Mapping[Any, Any] | None = None,
        *,
        key: SlotKey | None = None,
        label: str | None = None,
    ) -> SlotKey:
        """Register a slot and return its handle.

        Passing the handle of a slot that is already registered is a no-op:
        the slot keeps both its position and its contents.
        """
        if key is not None and key in self._slots:
            return key
        if key is None:
            key = SlotKey(label)
        self._slots[key] = _as_bag(contents)
        _logger.debug("Registered metadata slot %r (slots=%d)", key, len(self._slots))
        return key

    def update(self, key: SlotKey, contents: Mapping[Any, Any] | None) -> bool:
        """Replace the contents of *key*. Returns ``False`` if it is not registered."""
        if key not in self._slots:
            _logger.debug("Ignoring update for unregistered metadata slot %r", key)
            return False
        self._slots[key] = _as_bag(contents)
        return True

    def unregister(self, key: SlotKey) -> bool:
        removed = self._slots.pop(key, None) is not None
        if removed:
            _logger.debug("Unregistered metadata slot %r (slots=%d)", key, len(self._slots))
        return removed

    def get(self, key: SlotKey) -> dict[str, Any] | None:
        contents = self._slots.get(key)
        return dict(contents) if contents is not None else None

    def merge(self) -> dict[str, Any]:
        """Fold all slots in registration order; later registrations win."""
        merged: dict[str, Any] = {}
        for contents in self._slots.values():
            merged.update(contents)
        return merged
