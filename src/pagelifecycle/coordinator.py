"""Load coordinator: in-flight load counting and the settling flag.

The coordinator never emits anything. Its operations return whether the
caller has become responsible for the terminal event of the current
navigation; the emitter acts on that answer.
"""

from __future__ import annotations

import logging

from pagelifecycle.exceptions import UnbalancedLoadError

_logger = logging.getLogger(__name__)


class LoadCoordinator:
    """Reference count of outstanding loads plus the settling flag.

    The flag starts clear and is armed by the emitter when the first
    location is observed, so no terminal decision can be made before a
    navigation has started.
    """

    def __init__(self, *, strict: bool = False, logger: logging.Logger | None = None) -> None:
        self._pending = 0
        self._settling = False
        self._imbalance_count = 0
        self._strict = strict
        self._logger = logger or _logger

    @property
    def pending(self) -> int:
        return self._pending

    @property
    def settling(self) -> bool:
        return self._settling

    @property
    def is_idle(self) -> bool:
        return self._pending == 0

    @property
    def imbalance_count(self) -> int:
        """Number of unmatched ``end_load``/``fail_load`` calls absorbed so far."""
        return self._imbalance_count

    def begin_load(self) -> None:
        self._pending += 1
        self._logger.debug("Begin loading data pending=%d", self._pending)

    def end_load(self) -> bool:
        """Decrement the counter.

        Returns ``True`` when this call brought the counter to zero while
        the current navigation is still settling. Late completions after
        the navigation settled only update the counter.
        """
        if not self._decrement("end_loading_data"):
            return False
        self._logger.debug("End loading data pending=%d settling=%s", self._pending, self._settling)
        return self._pending == 0 and self._settling

    def fail_load(self) -> bool:
        """Decrement the counter for a failed load.

        Returns ``True`` whenever the navigation is still settling: a single
        failure terminates it regardless of the other outstanding loads, and
        an unmatched failure report is still a failure.
        """
        # Strict mode never suppresses a failure report.
        self._decrement("fail_loading_data", strict=False)
        self._logger.debug("Failed loading data pending=%d settling=%s", self._pending, self._settling)
        return self._settling

    def arm_for_transition(self) -> None:
        """Mark a new navigation as settling; outstanding loads keep counting."""
        self._settling = True

    def settle(self) -> bool:
        """Clear the settling flag. Returns ``False`` if it was already clear."""
        if not self._settling:
            return False
        self._settling = False
        return True

    def _decrement(self, operation: str, *, strict: bool | None = None) -> bool:
        if self._pending > 0:
            self._pending -= 1
            return True

        self._imbalance_count += 1
        if strict is None:
            strict = self._strict
        if strict:
            raise UnbalancedLoadError(
                f"{operation} called without a matching begin_loading_data",
                imbalance_count=self._imbalance_count,
            )
        self._logger.warning(
            "Unbalanced %s ignored (imbalance_count=%d)",
            operation,
            self._imbalance_count,
        )
        return False
