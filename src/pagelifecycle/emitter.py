"""Lifecycle emitter: the single producer of the page event stream.

:class:`PageLifecycle` owns a route tracker, a load coordinator and a
metadata registry, and turns the three independent input streams
(location changes, begin/end loading signals, metadata slots) into exactly
one start event and exactly one terminal event per navigation.

Usage::

    lifecycle = PageLifecycle(on_event=events.append)
    lifecycle.location_changed(Location.parse("/"))
    lifecycle.begin_loading_data()
    ...
    lifecycle.end_loading_data()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from pagelifecycle._redact import redact_for_log
from pagelifecycle.config import LifecycleConfig
from pagelifecycle.coordinator import LoadCoordinator
from pagelifecycle.events import LifecycleEventType, LifecycleState, LoadingState, PageLifecycleEvent
from pagelifecycle.listeners import CallbackArena, Subscription
from pagelifecycle.metadata import MetadataRegistry, SlotKey
from pagelifecycle.routing import RouteTracker

_logger = logging.getLogger(__name__)

#: Error description of the failed event that closes a navigation which was
#: still settling when the next one started.
SUPERSEDED_ERROR = "Navigation superseded before page load completed"


def _now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


def describe_error(error: BaseException | str | None) -> str:
    if error is None:
        return "Unknown error"
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error) or "Unknown error"


class PageLifecycle:
    """Aggregates page loading signals into lifecycle events.

    Parameters
    ----------
    on_event : callable
        Sink receiving every :class:`PageLifecycleEvent`, in order. It must
        not block; exceptions it raises are logged and swallowed.
    config : LifecycleConfig, optional
        Behaviour switches; defaults to ``LifecycleConfig()``.
    clock : callable, optional
        Returns epoch milliseconds for event timestamps.
    location_source : callable, optional
        Returns the host's current location. When given, it is polled before
        every end/fail report so a navigation is armed before a coincidental
        zero count can complete it.
    logger : logging.Logger, optional
        Logger used instead of the module logger.
    """

    def __init__(
        self,
        on_event: Callable[[PageLifecycleEvent], Any],
        *,
        config: LifecycleConfig | None = None,
        clock: Callable[[], int] = _now_ms,
        location_source: Callable[[], Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._on_event = on_event
        self._config = config or LifecycleConfig()
        self._clock = clock
        self._location_source = location_source
        self._logger = logger or _logger
        self._tracker = RouteTracker(self._config.location_match)
        self._loads = LoadCoordinator(strict=self._config.strict_load_balance, logger=self._logger)
        self._page_props = MetadataRegistry()
        self._state_listeners: CallbackArena[LifecycleState] = CallbackArena("page state", logger=self._logger)
        self._route_listeners: CallbackArena[Any] = CallbackArena("route", logger=self._logger)
        # Incremented per navigation; deferred checks compare against it.
        self._navigation = 0

    # ------------------------------------------------------------------
    # Derived read-only state
    # ------------------------------------------------------------------

    @property
    def config(self) -> LifecycleConfig:
        return self._config

    @property
    def current_page_location(self) -> Any:
        return self._tracker.current

    @property
    def current_page_state(self) -> LoadingState:
        if self._navigation == 0 or self._loads.settling:
            return LoadingState.LOADING
        return LoadingState.LOADED

    @property
    def state(self) -> LifecycleState:
        return LifecycleState(
            current_page_state=self.current_page_state,
            current_page_location=self.current_page_location,
        )

    @property
    def is_settling(self) -> bool:
        return self._loads.settling

    @property
    def loading_count(self) -> int:
        return self._loads.pending

    @property
    def imbalance_count(self) -> int:
        return self._loads.imbalance_count

    @property
    def navigation_count(self) -> int:
        return self._navigation

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def location_changed(self, location: Any) -> bool:
        """Report the host's current location.

        Safe to call on every render: repeated equal locations are ignored.
        Returns ``True`` when a navigation was started.
        """
        initial = not self._tracker.initialized
        if not initial and not self._tracker.is_transition(location):
            self._tracker.observe(location)
            return False

        # Events are built before any state changes so a payload that cannot
        # be serialised leaves the tracker free to retry this location.
        previous = self._tracker.reference
        superseded = None
        if not initial and self._loads.settling:
            superseded = self._terminal_event(
                LifecycleEventType.FAILED, error=SUPERSEDED_ERROR, location=previous
            )
        started = self._build_event(LifecycleEventType.STARTED, self._payload(location))

        self._tracker.observe(location)
        if initial:
            self._logger.debug("Initial location %s", location)
        else:
            self._logger.debug(
                "Path changed old_path=%s new_path=%s",
                getattr(previous, "pathname", previous),
                getattr(location, "pathname", location),
            )
        if superseded is not None:
            self._settle_with(superseded)
        self._start_navigation(location, started)
        return True

    def _start_navigation(self, location: Any, event: PageLifecycleEvent) -> None:
        self._navigation += 1
        generation = self._navigation
        self._loads.arm_for_transition()

        self._dispatch(event)
        if generation != self._navigation:
            return
        # A sink that settled the page reentrantly already reported LOADED.
        if self._loads.settling:
            self._notify_state()
        if generation != self._navigation:
            return
        # Route listeners run before the idle check so contributors reacting
        # to the navigation can begin their loads synchronously.
        self._route_listeners.dispatch(location)

        if generation == self._navigation and self._loads.is_idle:
            # No data load triggered, the page is complete already.
            self._finish(LifecycleEventType.COMPLETE)

    # ------------------------------------------------------------------
    # Loading signals
    # ------------------------------------------------------------------

    def begin_loading_data(self) -> None:
        """Increment the loading count."""
        self._loads.begin_load()

    def end_loading_data(self) -> None:
        """Decrement the loading count, completing the page when it hits zero."""
        self._poll_location()
        if self._loads.end_load():
            self._finish(LifecycleEventType.COMPLETE)

    def fail_loading_data(self, error: BaseException | str | None = None) -> None:
        """Report a failed load in place of :meth:`end_loading_data`."""
        self._poll_location()
        description = describe_error(error)
        if self._loads.fail_load():
            self._finish(LifecycleEventType.FAILED, error=description)
        else:
            self._logger.debug("Ignoring load failure after page settled: %s", description)

    def _poll_location(self) -> None:
        if self._location_source is not None:
            self.location_changed(self._location_source())

    # ------------------------------------------------------------------
    # Page properties
    # ------------------------------------------------------------------

    def register_page_props(
        self,
        page_properties: Mapping[Any, Any] | None = None,
        *,
        key: SlotKey | None = None,
        label: str | None = None,
    ) -> SlotKey:
        return self._page_props.register(page_properties, key=key, label=label)

    def update_page_props(self, key: SlotKey, page_properties: Mapping[Any, Any] | None) -> None:
        if not self._page_props.update(key, page_properties):
            return
        if self._config.recheck_on_metadata_update and self._loads.settling and self._loads.is_idle:
            self._finish(LifecycleEventType.COMPLETE)

    def unregister_page_props(self, key: SlotKey) -> None:
        self._page_props.unregister(key)

    def merged_page_props(self) -> dict[str, Any]:
        return self._page_props.merge()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def on_page_state_changed(self, callback: Callable[[LifecycleState], Any]) -> Subscription:
        return self._state_listeners.add(callback)

    def off_page_state_changed(self, subscription: Subscription) -> None:
        self._state_listeners.remove(subscription)

    def on_route_changed(self, callback: Callable[[Any], Any]) -> Subscription:
        return self._route_listeners.add(callback)

    def off_route_changed(self, subscription: Subscription) -> None:
        self._route_listeners.remove(subscription)

    def _notify_state(self) -> None:
        state = self.state
        if self._config.trace_enabled:
            self._logger.debug(
                "Setting page state %s location=%s on %d listeners",
                state.current_page_state,
                state.current_page_location,
                len(self._state_listeners),
            )
        self._state_listeners.dispatch(state)

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def _finish(
        self,
        event_type: LifecycleEventType,
        *,
        error: str | None = None,
        location: Any = None,
    ) -> bool:
        """Emit the terminal event of the current navigation, at most once."""
        if not self._loads.settling:
            return False
        return self._settle_with(self._terminal_event(event_type, error=error, location=location))

    def _terminal_event(
        self,
        event_type: LifecycleEventType,
        *,
        error: str | None = None,
        location: Any = None,
    ) -> PageLifecycleEvent:
        payload = self._payload(self._tracker.current if location is None else location)
        if error is not None:
            payload["error"] = error
        return self._build_event(event_type, payload)

    def _settle_with(self, event: PageLifecycleEvent) -> bool:
        if not self._loads.settle():
            return False
        self._dispatch(event)
        self._notify_state()
        return True

    def _payload(self, location: Any) -> dict[str, Any]:
        return {**self._page_props.merge(), "location": location}

    def _build_event(self, event_type: LifecycleEventType, payload: dict[str, Any]) -> PageLifecycleEvent:
        return PageLifecycleEvent(
            type=event_type,
            time_stamp=self._clock(),
            originator=self._config.originator,
            payload=payload,
        )

    def _dispatch(self, event: PageLifecycleEvent) -> None:
        self._logger.debug("Raising %s event payload=%s", event.type.value, redact_for_log(event.payload))
        try:
            self._on_event(event)
        except Exception:
            self._logger.warning("on_event sink failed for %s", event.type.value, exc_info=True)
