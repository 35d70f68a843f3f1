import logging
import queue
import threading
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

NOT_STARTED = "not_started"
PENDING = "pending"
READY = "ready"
FAILED = "failed"


class AsyncSlot(Generic[T]):
    """Single-slot holder for the result of a background call.

    The fetch runs on a daemon thread and hands its outcome back through a
    queue; the owner sees it only by calling ``poll()`` from its own loop.
    At most one request is in flight at a time.
    """

    def __init__(self, fetch_fn: Callable[[], T], name: str = "fetch"):
        self._fetch_fn = fetch_fn
        self.name = name
        self.state = NOT_STARTED
        self.value: Optional[T] = None
        self.error: Optional[BaseException] = None

        self._results: queue.Queue = queue.Queue()
        self._generation = 0
        self.started_count = 0

    @property
    def pending(self) -> bool:
        return self.state == PENDING

    def trigger(self) -> bool:
        if self.state == PENDING:
            return False

        self._generation += 1
        generation = self._generation
        self.state = PENDING
        self.error = None
        self.started_count += 1

        t = threading.Thread(
            target=self._run, args=(generation,), name=f"slot-{self.name}", daemon=True
        )
        t.start()
        return True

    def refresh(self) -> bool:
        return self.trigger()

    def _run(self, generation: int):
        try:
            value = self._fetch_fn()
        except Exception as exc:
            logger.warning("%s failed: %s", self.name, exc)
            self._results.put((generation, False, exc))
            return
        self._results.put((generation, True, value))

    def poll(self) -> str:
        while True:
            try:
                generation, ok, payload = self._results.get_nowait()
            except queue.Empty:
                break
            if generation != self._generation or self.state != PENDING:
                continue
            if ok:
                self.value = payload
                self.error = None
                self.state = READY
            else:
                self.error = payload
                self.state = FAILED
        return self.state
