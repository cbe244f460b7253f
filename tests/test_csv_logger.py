"""
Unit tests for CSV export and the event buffer.
"""

import csv
import logging
import math
import pytest
import sys
import threading
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from control_workbench.logging.csv_logger import CSVLogger, EventBuffer, format_cell
from control_workbench.logging.log_config import configure_logging


def read_rows(path):
    with open(path, newline='') as f:
        return list(csv.DictReader(f))


class TestCSVLogger:
    """Test suite for CSVLogger."""

    def test_header_and_rows(self, tmp_path):
        path = tmp_path / "out" / "run.csv"
        with CSVLogger(str(path), columns=["time", "a", "b"]) as logger:
            logger.log({"time": 0.1, "a": 1.5})
            logger.log({"time": 0.2, "a": 2.5, "b": -1.0})
            assert logger.total_rows == 2

        rows = read_rows(path)
        assert rows[0] == {"time": "0.1", "a": "1.5", "b": ""}
        assert rows[1]["b"] == "-1.0"

    def test_buffered_until_flush(self, tmp_path):
        path = tmp_path / "run.csv"
        logger = CSVLogger(str(path), columns=["time"], buffer_size=10, flush_interval=60.0)
        logger.log({"time": 0.1})
        assert read_rows(path) == []
        logger.flush()
        assert len(read_rows(path)) == 1
        logger.close()
        assert logger.closed

    def test_log_after_close(self, tmp_path):
        logger = CSVLogger(str(tmp_path / "run.csv"), columns=["time"])
        logger.close()
        with pytest.raises(RuntimeError):
            logger.log({"time": 0.0})

    @pytest.mark.parametrize("kwargs", [
        {"columns": []},
        {"columns": ["a", "a"]},
        {"columns": ["a"], "buffer_size": 0},
        {"columns": ["a"], "flush_interval": 0.0},
    ])
    def test_invalid_arguments(self, tmp_path, kwargs):
        with pytest.raises(ValueError):
            CSVLogger(str(tmp_path / "run.csv"), **kwargs)

    def test_format_cell(self):
        assert format_cell(None) == ''
        assert format_cell(0.1) == '0.1'
        assert format_cell(math.nan) == 'nan'
        assert format_cell("x") == "x"


class TestEventBuffer:
    """Test suite for EventBuffer."""

    def test_bounded(self):
        buffer = EventBuffer(max_size=3)
        buffer.extend([{"i": i} for i in range(5)])
        assert len(buffer) == 3
        assert buffer.is_full
        assert [e["i"] for e in buffer.get_all()] == [2, 3, 4]
        assert buffer.get_last(2) == [{"i": 3}, {"i": 4}]
        assert buffer.get_last(0) == []

    def test_clear(self):
        buffer = EventBuffer()
        buffer.append({"error": "x"})
        buffer.clear()
        assert len(buffer) == 0

    def test_to_csv(self, tmp_path):
        path = tmp_path / "events.csv"
        buffer = EventBuffer(columns=["block_id", "error"])
        buffer.append({"block_id": "pid1", "error": "dt must be positive", "time": 0.1})
        buffer.to_csv(str(path))
        assert read_rows(path) == [{"block_id": "pid1", "error": "dt must be positive"}]

    def test_concurrent_appends(self):
        buffer = EventBuffer(max_size=50)
        threads = [
            threading.Thread(target=lambda: [buffer.append({"i": i}) for i in range(100)])
            for _ in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(buffer) == 50
        assert buffer.is_full

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            EventBuffer(max_size=0)


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_file_handler(self, tmp_path):
        path = tmp_path / "workbench.log"
        configure_logging("debug", log_file=str(path))
        root = logging.getLogger()
        try:
            assert root.level == logging.DEBUG
            logging.getLogger("control_workbench.test").debug("hello")
            for handler in root.handlers:
                handler.flush()
            assert "hello" in path.read_text()
        finally:
            for handler in list(root.handlers):
                root.removeHandler(handler)
                handler.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
