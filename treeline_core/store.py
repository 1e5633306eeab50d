from __future__ import annotations

from collections import deque
import logging
import threading
from typing import Callable

from .events import StoreEvent
from .state import AppState, initial_state, reduce

LOGGER = logging.getLogger(__name__)

StateListener = Callable[[AppState, StoreEvent], None]


class ChartStore:
    """Single owner of ``AppState``.

    ``dispatch`` may be called from any thread and only enqueues. Events are
    reduced one at a time, in arrival order, by whoever calls
    ``process_pending``.
    """

    def __init__(self, state: AppState | None = None, max_queue_size: int = 1024) -> None:
        if max_queue_size <= 0:
            raise ValueError("max_queue_size must be > 0")
        self._state = state if state is not None else initial_state()
        self._max_queue_size = max_queue_size
        self._queue: deque[StoreEvent] = deque()
        self._lock = threading.Lock()
        self._pending = threading.Condition(self._lock)
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: StoreEvent) -> None:
        with self._pending:
            if len(self._queue) >= self._max_queue_size:
                raise RuntimeError(f"store queue is full ({self._max_queue_size} events)")
            self._queue.append(event)
            self._pending.notify_all()

    def pending_count(self) -> int:
        with self._lock:
            return len(self._queue)

    def wait_for_events(self, timeout: float | None = None) -> bool:
        with self._pending:
            return self._pending.wait_for(lambda: bool(self._queue), timeout=timeout)

    def process_pending(self, max_events: int | None = None) -> int:
        if max_events is not None and max_events <= 0:
            raise ValueError("max_events must be > 0")
        processed = 0
        while max_events is None or processed < max_events:
            with self._lock:
                if not self._queue:
                    break
                event = self._queue.popleft()
            self._apply(event)
            processed += 1
        return processed

    def apply(self, event: StoreEvent) -> AppState:
        """Reduce ``event`` immediately, bypassing the queue. Consumer thread only."""
        self.process_pending()
        self._apply(event)
        return self._state

    def _apply(self, event: StoreEvent) -> None:
        self._state = reduce(self._state, event)
        LOGGER.debug("reduced %s", type(event).__name__)
        for listener in list(self._listeners):
            listener(self._state, event)
