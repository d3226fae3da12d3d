import threading
from typing import Callable, List


class CancellationToken:
    """
    One-shot cancellation signal.
    Listeners registered after the signal fired are called immediately.
    """
    def __init__(self):
        self._cancelled = False
        self._listeners: List[Callable[[], None]] = []
        self._lock = threading.Lock()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self):
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener()

    def on_cancellation_requested(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Registers a listener. Returns a callable that unsubscribes it."""
        with self._lock:
            if not self._cancelled:
                self._listeners.append(listener)
                return lambda: self._remove(listener)
        listener()
        return lambda: None

    def _remove(self, listener: Callable[[], None]):
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
