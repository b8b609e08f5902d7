"""Contributor helper for components that add to the current page.

A :class:`PageContributor` owns one metadata slot and reports its loads
to the lifecycle it was handed. Loads can be reported manually, through the
``loading()``/``aloading()`` context managers, or by awaiting through
:meth:`PageContributor.track`.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator, Awaitable, Iterator, Mapping
from typing import Any, TypeVar

from pagelifecycle.context import ensure_context
from pagelifecycle.emitter import PageLifecycle
from pagelifecycle.metadata import SlotKey

T = TypeVar("T")


class PageContributor:
    """One component's view of the page lifecycle.

    Usage::

        with PageContributor(lifecycle, {"section": "news"}) as contributor:
            async with contributor.aloading():
                articles = await fetch_articles()
    """

    def __init__(
        self,
        lifecycle: PageLifecycle | None,
        page_properties: Mapping[Any, Any] | None = None,
        *,
        label: str | None = None,
    ) -> None:
        self._lifecycle = lifecycle
        self._page_properties = dict(page_properties or {})
        self._label = label
        self._key: SlotKey | None = None

    @property
    def lifecycle(self) -> PageLifecycle:
        return ensure_context(self._lifecycle)

    @property
    def mounted(self) -> bool:
        return self._key is not None

    @property
    def page_properties(self) -> dict[str, Any]:
        return dict(self._page_properties)

    def __enter__(self) -> PageContributor:
        self.mount()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.unmount()

    # ------------------------------------------------------------------
    # Page properties
    # ------------------------------------------------------------------

    def mount(self) -> SlotKey:
        """Register this contributor's properties. Idempotent."""
        lifecycle = self.lifecycle
        self._key = lifecycle.register_page_props(self._page_properties, key=self._key, label=self._label)
        return self._key

    def update(self, page_properties: Mapping[Any, Any] | None) -> None:
        lifecycle = self.lifecycle
        self._page_properties = dict(page_properties or {})
        if self._key is not None:
            lifecycle.update_page_props(self._key, self._page_properties)

    def unmount(self) -> None:
        lifecycle = self.lifecycle
        if self._key is not None:
            lifecycle.unregister_page_props(self._key)
            self._key = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def begin_loading_data(self) -> None:
        self.lifecycle.begin_loading_data()

    def end_loading_data(self) -> None:
        self.lifecycle.end_loading_data()

    def fail_loading_data(self, error: BaseException | str | None = None) -> None:
        self.lifecycle.fail_loading_data(error)

    @contextlib.contextmanager
    def loading(self) -> Iterator[None]:
        """Count the enclosed block as one load; an exception fails the page."""
        lifecycle = self.lifecycle
        lifecycle.begin_loading_data()
        try:
            yield
        except Exception as exc:
            lifecycle.fail_loading_data(exc)
            raise
        except BaseException:
            # Cancelled loads still release their count.
            lifecycle.end_loading_data()
            raise
        lifecycle.end_loading_data()

    @contextlib.asynccontextmanager
    async def aloading(self) -> AsyncIterator[None]:
        """Async variant of :meth:`loading`."""
        lifecycle = self.lifecycle
        lifecycle.begin_loading_data()
        try:
            yield
        except Exception as exc:
            lifecycle.fail_loading_data(exc)
            raise
        except BaseException:
            # Cancelled loads still release their count.
            lifecycle.end_loading_data()
            raise
        lifecycle.end_loading_data()

    async def track(self, awaitable: Awaitable[T]) -> T:
        """Await *awaitable* as one load and return its result."""
        async with self.aloading():
            return await awaitable
