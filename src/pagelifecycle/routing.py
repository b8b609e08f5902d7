"""Route tracker: detects navigations from observed locations."""

from __future__ import annotations

from typing import Any

from pagelifecycle.config import LocationMatch

_UNSET: Any = object()


def _pathname(location: Any) -> Any:
    return getattr(location, "pathname", location)


def locations_match(a: Any, b: Any, match: LocationMatch) -> bool:
    """Return ``True`` when *a* and *b* count as the same page under *match*."""
    if match is LocationMatch.IDENTITY:
        return a is b
    if match is LocationMatch.PATHNAME:
        return bool(_pathname(a) == _pathname(b))
    return bool(a == b)


class RouteTracker:
    """Compares each observed location against the last acted-upon one.

    Only locations at which a transition was reported become the new
    reference, so a sequence of equal observations never yields more than
    one transition. The first observation initialises the tracker and is
    not itself a transition.
    """

    def __init__(self, match: LocationMatch = LocationMatch.VALUE) -> None:
        self._match = LocationMatch(match)
        self._reference: Any = _UNSET
        self._current: Any = _UNSET

    @property
    def initialized(self) -> bool:
        return self._reference is not _UNSET

    @property
    def current(self) -> Any:
        """Most recently observed location (``None`` before the first one)."""
        return None if self._current is _UNSET else self._current

    @property
    def reference(self) -> Any:
        """Location at which the last transition was acted upon."""
        return None if self._reference is _UNSET else self._reference

    def is_transition(self, location: Any) -> bool:
        """Whether observing *location* would report a navigation. No side effects."""
        if self._reference is _UNSET:
            return False
        return not locations_match(self._reference, location, self._match)

    def observe(self, location: Any) -> bool:
        """Record *location*; return ``True`` if it is a new navigation."""
        transition = self.is_transition(location)
        self._current = location
        if transition or self._reference is _UNSET:
            self._reference = location
        return transition
