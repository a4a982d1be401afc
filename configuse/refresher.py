"""Background polling of the configuration service.

The refresher is the only writer of its cache. It runs in a single
daemon thread and paces itself by waiting on a stop event between
polls:

    AWAITING_FIRST_LOAD --success--> STEADY
    AWAITING_FIRST_LOAD --failure--> retry after retry_delay_s,
                                     or FirstLoadFailure once the
                                     retry budget is spent
    STEADY --success/failure--> poll again after refresh_interval_s

"""

import logging
import threading
import time
from typing import Optional

import aenum

from configuse import exceptions


logger = logging.getLogger(__name__)

MIN_REFRESH_INTERVAL_S = 0.001
FALLBACK_REFRESH_INTERVAL_S = 60


class Phase(aenum.Enum):
    AWAITING_FIRST_LOAD = "awaiting_first_load"
    STEADY = "steady"


class Refresher:
    def __init__(self, settings, fetcher, cache, signal, stop_event: Optional[threading.Event] = None):
        self.fetcher = fetcher
        self.cache = cache
        self.signal = signal
        self.phase = Phase.AWAITING_FIRST_LOAD
        self.retry_counter = 0
        self.refresh_interval_s = settings.refresh_interval_s
        self.first_load_retry_count = settings.first_load_retry_count
        self.retry_delay_s = settings.retry_delay_s
        self.last_successful_load = None
        self.stop_event = stop_event or threading.Event()
        self._thread = None

    def poll(self) -> float:
        """Makes one fetch attempt and returns the delay before the next.

        Raises FirstLoadFailure when the first load has failed one time
        more than the retry budget allows.
        """
        try:
            pairs = [(key, value) for key, value in self.fetcher.fetch()]
        except exceptions.FetchFailure as e:
            return self._failed(e)
        except Exception as e:
            logger.exception("unexpected error while fetching configurations")
            return self._failed(e)
        return self._succeeded(pairs)

    def _succeeded(self, pairs) -> float:
        first_load = self.phase is Phase.AWAITING_FIRST_LOAD
        self.cache.reconcile(pairs, first_load=first_load)
        self.last_successful_load = time.time()
        if first_load:
            self.signal.set()
            self.phase = Phase.STEADY
            if self.refresh_interval_s < MIN_REFRESH_INTERVAL_S:
                logger.warning(
                    "wrong refresh interval %r, will be set as: %ss",
                    self.refresh_interval_s, FALLBACK_REFRESH_INTERVAL_S,
                )
                self.refresh_interval_s = FALLBACK_REFRESH_INTERVAL_S
            logger.info(
                "configurations loaded for the first time",
                extra={"configuration_count": len(self.cache), "retry_counter": self.retry_counter},
            )
        return self.refresh_interval_s

    def _failed(self, error) -> float:
        if self.phase is Phase.STEADY:
            logger.warning(
                "configurations didn't update, keeping cached values: %s", error,
                extra={"phase": self.phase.value},
            )
            return self.refresh_interval_s
        self.retry_counter += 1
        logger.warning(
            "configurations didn't update counter:%d: %s", self.retry_counter, error,
            extra={"phase": self.phase.value, "retry_counter": self.retry_counter},
        )
        if self.retry_counter <= self.first_load_retry_count:
            return self.retry_delay_s
        raise exceptions.FirstLoadFailure(self.retry_counter) from error

    def run(self) -> None:
        try:
            while not self.stop_event.is_set():
                delay = self.poll()
                if self.stop_event.wait(delay):
                    break
        except exceptions.FirstLoadFailure as e:
            logger.error(str(e), extra={"retry_counter": self.retry_counter})
            self.signal.fail(e)
        except Exception as e:
            logger.exception("configuration refresher stopped unexpectedly")
            self.signal.fail(e)
        finally:
            if self.phase is Phase.AWAITING_FIRST_LOAD:
                self.signal.fail(exceptions.RefresherStopped(
                    "refresher stopped before first load ({} attempts)".format(self.retry_counter)))

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("refresher already started")
        self._thread = threading.Thread(target=self.run, name="configuse-refresher", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self.stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
