"""
Persist Triggers - signal the tracker that a global persist is needed.

Supports:
- Manual triggers fired by the application
- Exit triggers fired on interpreter shutdown (atexit, optional signals)
"""

import atexit
import logging
import signal
from typing import Callable

from statekeeper.core.exceptions import PersistTriggerError

logger = logging.getLogger(__name__)

# Type alias for persist-required callbacks
PersistCallback = Callable[[], None]


class PersistTrigger:
    """
    Event source emitting a payload-free "persist now" signal.

    Each subscribed callback runs once per ``fire``. Subscribing the
    same callback twice keeps a single subscription.
    """

    def __init__(self):
        self._subscribers: list[PersistCallback] = []

    @property
    def subscriber_count(self) -> int:
        """Number of active subscriptions."""
        return len(self._subscribers)

    def subscribe(self, callback: PersistCallback) -> None:
        """Subscribe a callback to the persist-required signal."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: PersistCallback) -> None:
        """Remove a subscription. Unknown callbacks are ignored."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def fire(self) -> None:
        """
        Notify every subscriber that state should be persisted.

        A failing subscriber does not stop the others. A single failure
        is re-raised unchanged once all subscribers ran.

        Raises:
            PersistTriggerError: If more than one subscriber failed
        """
        logger.debug(f"{self.__class__.__name__} fired ({len(self._subscribers)} subscribers)")
        errors: list[Exception] = []
        for callback in list(self._subscribers):
            try:
                callback()
            except Exception as e:
                logger.error(f"{self.__class__.__name__} subscriber failed: {e}")
                errors.append(e)

        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise PersistTriggerError(
                f"{len(errors)} persist trigger subscribers failed",
                errors=errors,
            )


class ManualPersistTrigger(PersistTrigger):
    """Trigger fired explicitly, e.g. from a window-close handler."""


class ExitPersistTrigger(PersistTrigger):
    """
    Trigger fired once when the process shuts down.

    Registers an atexit handler on creation. With ``handle_signals``
    SIGTERM and SIGINT also fire the trigger before exiting. Must be
    created on the main thread when ``handle_signals`` is set.
    """

    def __init__(self, handle_signals: bool = False):
        super().__init__()
        self._fired = False
        self._closed = False
        atexit.register(self._atexit_handler)
        if handle_signals:
            self._setup_signal_handlers()

    @property
    def fired(self) -> bool:
        """Whether the shutdown signal has already been emitted."""
        return self._fired

    def fire(self) -> None:
        if self._fired:
            return
        self._fired = True
        super().fire()

    def _atexit_handler(self) -> None:
        """Persist on process shutdown (registered with atexit)."""
        try:
            self.fire()
        except Exception as e:
            # atexit handlers should not raise exceptions
            logger.warning(f"Failed to persist tracked state during shutdown: {e}")

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for persisting before termination."""
        def handler(signum, frame):
            self._atexit_handler()
            raise SystemExit(128 + signum)

        signal.signal(signal.SIGTERM, handler)
        signal.signal(signal.SIGINT, handler)

    def close(self) -> None:
        """Unregister the atexit handler without firing."""
        if not self._closed:
            atexit.unregister(self._atexit_handler)
            self._closed = True
