"""pagelifecycle - page load lifecycle events for single-page clients."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pagelifecycle")
except PackageNotFoundError:
    __version__ = "0+local"
from pagelifecycle.config import LifecycleConfig, LocationMatch
from pagelifecycle.context import ContextRegistry, ensure_context
from pagelifecycle.contributor import PageContributor
from pagelifecycle.coordinator import LoadCoordinator
from pagelifecycle.emitter import SUPERSEDED_ERROR, PageLifecycle
from pagelifecycle.events import (
    LifecycleEventType,
    LifecycleState,
    LoadingState,
    Location,
    PageLifecycleEvent,
)
from pagelifecycle.exceptions import (
    MissingLifecycleContextError,
    PageLifecycleConfigError,
    PageLifecycleError,
    UnbalancedLoadError,
)
from pagelifecycle.listeners import CallbackArena, Subscription
from pagelifecycle.metadata import MetadataRegistry, SlotKey
from pagelifecycle.routing import RouteTracker

__all__ = [
    "__version__",
    "SUPERSEDED_ERROR",
    "CallbackArena",
    "ContextRegistry",
    "LifecycleConfig",
    "LifecycleEventType",
    "LifecycleState",
    "LoadCoordinator",
    "LoadingState",
    "Location",
    "LocationMatch",
    "MetadataRegistry",
    "MissingLifecycleContextError",
    "PageContributor",
    "PageLifecycle",
    "PageLifecycleConfigError",
    "PageLifecycleError",
    "PageLifecycleEvent",
    "RouteTracker",
    "SlotKey",
    "Subscription",
    "UnbalancedLoadError",
    "ensure_context",
]
