"""
Calculation channels.

A channel accepts requests and hands back responses. Responses are matched
to requests by id only; a channel makes no promise about ordering.

Features:
- In-process channel dispatching synchronously
- Worker channel running calculations on background threads
- Thread-safe queues between submitter and workers
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, List, Optional
import logging
import queue
import threading

from control_workbench.simulation.messages import (
    CalculationRequest,
    CalculationResponse,
    dispatch,
)

logger = logging.getLogger(__name__)


class CalculationChannel(ABC):
    """Abstract request/response channel to the calculators."""

    @abstractmethod
    def submit(self, request: CalculationRequest) -> None:
        """Send a request; its response becomes available via ``receive``."""
        pass

    @abstractmethod
    def receive(self, timeout: Optional[float] = None) -> Optional[CalculationResponse]:
        """
        Take the next available response.

        Args:
            timeout: Seconds to wait; None waits indefinitely

        Returns:
            A response, or None if none arrived in time
        """
        pass

    def close(self) -> None:
        """Release channel resources."""
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False


class InProcessChannel(CalculationChannel):
    """Dispatches each request synchronously on submit."""

    def __init__(self):
        self._responses: Deque[CalculationResponse] = deque()

    def submit(self, request: CalculationRequest) -> None:
        self._responses.append(dispatch(request))

    def receive(self, timeout: Optional[float] = None) -> Optional[CalculationResponse]:
        if not self._responses:
            return None
        return self._responses.popleft()

    @property
    def pending(self) -> int:
        return len(self._responses)


class WorkerChannel(CalculationChannel):
    """
    Runs calculations on a pool of worker threads.

    Requests and responses travel through thread-safe queues, so with more
    than one worker responses can come back in any order.

    Example:
        >>> with WorkerChannel(num_workers=2) as channel:
        ...     channel.submit(request)
        ...     response = channel.receive(timeout=1.0)
    """

    _STOP = object()

    def __init__(self, num_workers: int = 1):
        """
        Initialize and start the workers.

        Args:
            num_workers: Number of worker threads
        """
        if num_workers < 1:
            raise ValueError("num_workers must be at least 1")

        self._requests: queue.Queue = queue.Queue()
        self._responses: queue.Queue = queue.Queue()
        self._closed = False
        self._lock = threading.Lock()

        self._workers: List[threading.Thread] = []
        for i in range(num_workers):
            worker = threading.Thread(
                target=self._work,
                name=f"calc-worker-{i}",
                daemon=True
            )
            worker.start()
            self._workers.append(worker)

    def _work(self) -> None:
        while True:
            item = self._requests.get()
            try:
                if item is self._STOP:
                    return
                self._responses.put(dispatch(item))
            finally:
                self._requests.task_done()

    def submit(self, request: CalculationRequest) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("Channel is closed")
            self._requests.put(request)

    def receive(self, timeout: Optional[float] = None) -> Optional[CalculationResponse]:
        try:
            return self._responses.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self) -> None:
        """Stop the workers after the queued requests are served."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for _ in self._workers:
                self._requests.put(self._STOP)

        for worker in self._workers:
            worker.join(timeout=5.0)
        logger.debug("Worker channel closed")

    @property
    def num_workers(self) -> int:
        return len(self._workers)
