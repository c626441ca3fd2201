import threading
from typing import Callable, Optional

from ...logging_config import get_logger

logger = get_logger(__name__)


class _IdleTimer:
    """
    Recurring timer running `callback` every `interval` seconds.

    The timer is re-armed after each tick, so a slow callback delays the next
    tick instead of overlapping with it. Ticks run on a daemon thread.
    """

    def __init__(self, interval: float, callback: Callable[[], None]):
        self._interval = interval
        self._callback = callback
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._stopped = False

    def start(self) -> None:
        with self._lock:
            if self._stopped or self._timer is not None:
                return
            self._arm()

    def cancel(self) -> None:
        """Stops the timer. A tick already running completes, but is not re-armed."""
        with self._lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def is_running(self) -> bool:
        with self._lock:
            return self._timer is not None

    def _arm(self) -> None:
        self._timer = threading.Timer(self._interval, self._tick)
        self._timer.daemon = True
        self._timer.start()

    def _tick(self) -> None:
        try:
            self._callback()
        except Exception:
            logger.exception("Idle timer callback failed")
        finally:
            with self._lock:
                if not self._stopped:
                    self._arm()
