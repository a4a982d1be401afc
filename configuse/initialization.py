import threading
from typing import Optional


class InitializationSignal:
    """One-shot gate that opens after the first successful load.

    Any number of threads may wait on it. Once fired it stays fired;
    repeated set() calls are no-ops. If the first load can never happen
    the refresher calls fail() instead, which also releases waiters and
    makes wait() raise the recorded error.
    """
    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._error = None

    def set(self) -> bool:
        """Fires the signal. Returns True only for the call that fired it."""
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            return True

    def fail(self, error: BaseException) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._error = error
            self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set() and self._error is None

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def wait(self, timeout: Optional[float] = None) -> bool:
        if not self._event.wait(timeout):
            return False
        if self._error is not None:
            raise self._error
        return True
