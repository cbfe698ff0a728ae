import queue
from typing import Optional

from config.settings import QUEUE_CAPACITY
from models.schema import InvocationPayload
from utils.logging_setup import logger


class JobQueue:
    """Bounded FIFO of pending invocations; many producers, one consumer.

    Contents live in memory only and are lost when the process exits.
    """

    def __init__(self, capacity: int = QUEUE_CAPACITY):
        self.capacity = capacity
        self._q: "queue.Queue[InvocationPayload]" = queue.Queue(maxsize=capacity)

    def put(self, payload: InvocationPayload) -> None:
        # blocks while full; backpressure on the ingestion side
        self._q.put(payload)
        logger.debug(f"queue push run={payload.run_id} depth={self._q.qsize()}")

    def get(self, timeout: Optional[float] = None) -> InvocationPayload:
        """Remove the head, blocking while empty. Raises ``queue.Empty`` on timeout."""
        return self._q.get(timeout=timeout)

    def task_done(self) -> None:
        self._q.task_done()

    def qsize(self) -> int:
        return self._q.qsize()


# Initialize the process-wide queue
def init_queue(capacity: int = QUEUE_CAPACITY) -> JobQueue:
    logger.info(f"job queue ready capacity={capacity}")
    return JobQueue(capacity)
