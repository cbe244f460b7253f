"""
Buffered CSV export of simulation samples.

Features:
- Buffered writes so a step does not touch the disk every tick
- Flush on buffer size or time interval
- Thread-safe operation
- Blank cells for blocks that produced no sample in a step
"""

from typing import List, Dict, Any, Optional, Sequence
from pathlib import Path
from collections import deque
import csv
import math
import threading
import time


def format_cell(value: Any) -> Any:
    """Render a cell: None becomes blank, floats keep full precision."""
    if value is None:
        return ''
    if isinstance(value, float):
        if math.isnan(value):
            return 'nan'
        return repr(value)
    return value


class CSVLogger:
    """
    CSV writer for per-step simulation rows.

    Example:
        >>> logger = CSVLogger("run.csv", columns=["time", "pid1", "tf1"])
        >>> logger.log({"time": 0.01, "pid1": 0.55})
        >>> logger.close()
    """

    def __init__(
        self,
        file_path: str,
        columns: List[str],
        buffer_size: int = 100,
        flush_interval: float = 1.0
    ):
        """
        Initialize CSV logger and write the header.

        Args:
            file_path: Path to CSV file
            columns: List of column names
            buffer_size: Number of rows to buffer before writing
            flush_interval: Maximum seconds between flushes
        """
        if not columns:
            raise ValueError("columns cannot be empty")
        if len(set(columns)) != len(columns):
            raise ValueError("columns must be unique")
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")
        if flush_interval <= 0:
            raise ValueError("flush_interval must be positive")

        self._file_path = Path(file_path)
        self._columns = list(columns)
        self._buffer_size = buffer_size
        self._flush_interval = flush_interval

        self._lock = threading.Lock()
        self._buffer: deque = deque()
        self._last_flush_time = time.monotonic()
        self._total_rows = 0

        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self._file_path, 'w', newline='')
        self._writer = csv.DictWriter(self._file, fieldnames=self._columns)
        self._writer.writeheader()
        self._closed = False

    def log(self, data: Dict[str, Any]) -> None:
        """
        Log a row of data.

        Args:
            data: Mapping of column name to value; missing columns are blank
        """
        if self._closed:
            raise RuntimeError("Logger is closed")

        row = {col: format_cell(data.get(col)) for col in self._columns}

        with self._lock:
            self._buffer.append(row)
            self._total_rows += 1
            should_flush = (
                len(self._buffer) >= self._buffer_size or
                time.monotonic() - self._last_flush_time >= self._flush_interval
            )

        if should_flush:
            self.flush()

    def flush(self) -> None:
        """Flush buffer to disk."""
        with self._lock:
            if not self._buffer or self._closed:
                return
            rows_to_write = list(self._buffer)
            self._buffer.clear()
            self._last_flush_time = time.monotonic()

            try:
                self._writer.writerows(rows_to_write)
                self._file.flush()
            except OSError as e:
                self._buffer.extendleft(reversed(rows_to_write))
                raise RuntimeError(f"Failed to write to CSV: {e}") from e

    def close(self) -> None:
        """Close logger and flush remaining data."""
        if self._closed:
            return
        self.flush()
        with self._lock:
            self._closed = True
            self._file.close()

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    @property
    def total_rows(self) -> int:
        """Total number of logged rows."""
        return self._total_rows

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False


class EventBuffer:
    """
    Bounded in-memory history of simulation events.

    Keeps the most recent events (block failures, discarded responses)
    without unbounded memory growth.
    """

    def __init__(self, max_size: int = 1000, columns: Optional[List[str]] = None):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")

        self._max_size = max_size
        self._columns = columns
        self._buffer: deque = deque(maxlen=max_size)
        self._lock = threading.Lock()

    def append(self, event: Dict[str, Any]) -> None:
        with self._lock:
            self._buffer.append(dict(event))

    def extend(self, events: Sequence[Dict[str, Any]]) -> None:
        with self._lock:
            for event in events:
                self._buffer.append(dict(event))

    def get_all(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._buffer)

    def get_last(self, n: int) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._buffer)[-n:] if n > 0 else []

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    @property
    def is_full(self) -> bool:
        return len(self) >= self._max_size

    def to_csv(self, file_path: str) -> None:
        """Export buffered events to a CSV file."""
        events = self.get_all()
        if not events:
            return

        columns = self._columns or list(events[0].keys())
        with open(file_path, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=columns, extrasaction='ignore')
            writer.writeheader()
            writer.writerows(
                {col: format_cell(event.get(col)) for col in columns} for event in events
            )
