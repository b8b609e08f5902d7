"""Explicit lookup of the lifecycle handle for a contributor.

Contributors either receive a :class:`~pagelifecycle.emitter.PageLifecycle`
directly or look one up by their position in the host's component tree.
A missing handle is always a wiring mistake and raises immediately.
"""

from __future__ import annotations

from collections.abc import Iterable

from pagelifecycle.emitter import PageLifecycle
from pagelifecycle.exceptions import MissingLifecycleContextError

TreePosition = tuple[str, ...]


def ensure_context(lifecycle: PageLifecycle | None) -> PageLifecycle:
    """Return *lifecycle*, raising if no handle was supplied."""
    if lifecycle is None:
        raise MissingLifecycleContextError(
            "Page lifecycle context missing, ensure you have wrapped your application in a PageLifecycle"
        )
    return lifecycle


def _as_position(position: Iterable[str] | str) -> TreePosition:
    if isinstance(position, str):
        return tuple(part for part in position.split("/") if part)
    return tuple(position)


class ContextRegistry:
    """Lifecycle handles keyed by tree position.

    A lookup resolves to the handle provided at the nearest ancestor
    (or the position itself), mirroring how a provider scopes every node
    beneath it. Positions are tuples of path segments; ``"app/main"`` is
    accepted as shorthand for ``("app", "main")``.
    """

    def __init__(self) -> None:
        self._providers: dict[TreePosition, PageLifecycle] = {}

    def provide(self, position: Iterable[str] | str, lifecycle: PageLifecycle) -> None:
        self._providers[_as_position(position)] = lifecycle

    def revoke(self, position: Iterable[str] | str) -> None:
        self._providers.pop(_as_position(position), None)

    def find(self, position: Iterable[str] | str) -> PageLifecycle | None:
        path = _as_position(position)
        for depth in range(len(path), -1, -1):
            lifecycle = self._providers.get(path[:depth])
            if lifecycle is not None:
                return lifecycle
        return None

    def lookup(self, position: Iterable[str] | str) -> PageLifecycle:
        lifecycle = self.find(position)
        if lifecycle is None:
            path = _as_position(position)
            raise MissingLifecycleContextError(
                f"No PageLifecycle provided at or above {'/'.join(path) or '<root>'}",
                position=path,
            )
        return lifecycle
