"""
runlog.py

Per-test run trail. Each test gets a plain-text file under ``logs/`` named
``<test name>-<YYYY-MM-DD>.log``; every entry is one line appended in call
order and echoed to the console through the ``robot`` logger. Nothing is held
open between entries, and a failed write propagates to the caller.
"""
import logging
import re
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from pydantic import BaseModel, ConfigDict

from config import settings
from utils import logger, to_json


class Level(str, Enum):
    INFO = "INFO"
    ERROR = "ERROR"
    WARN = "WARN"
    DEBUG = "DEBUG"
    SUCCESS = "SUCCESS"
    STEP = "STEP"
    TEST = "TEST"


_CONSOLE_LEVELS = {
    Level.ERROR: logging.ERROR,
    Level.WARN: logging.WARNING,
    Level.DEBUG: logging.DEBUG,
}

TEST_STATUSES = ("PASSED", "FAILED")

_UNSAFE = re.compile(r"[:/\\]")

# One lock per log file so concurrent writers never interleave a line.
_path_locks: Dict[Path, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _path_locks_guard:
        return _path_locks.setdefault(path, threading.Lock())


def _json_default(obj: Any) -> Any:
    if isinstance(obj, BaseException):
        return {"type": type(obj).__name__, "message": str(obj)}
    return str(obj)


def _now_iso() -> str:
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: str
    level: Level
    message: str
    data: Any = None

    def format(self) -> str:
        line = f"[{self.timestamp}] [{self.level.value}] {self.message}"
        if self.data is not None:
            line += " - " + to_json(self.data, default=_json_default)
        return line


def log_file_name(test_name: str, day: Optional[str] = None) -> str:
    """``<test name>-<YYYY-MM-DD>.log`` with colons and path separators replaced."""
    day = day or datetime.now(timezone.utc).strftime("%Y-%m-%d")
    return _UNSAFE.sub("-", f"{test_name}-{day}.log")


class RunLogger:
    """Append-only, leveled log for one test (or suite)."""

    def __init__(self, test_name: str = "general", log_dir: Optional[str] = None) -> None:
        self.test_name = test_name
        self.log_dir = Path(log_dir or settings.log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file: Path = self.log_dir / log_file_name(test_name)

    def log(self, level: Level, message: str, data: Any = None) -> LogEntry:
        entry = LogEntry(
            timestamp=_now_iso(), level=Level(level), message=message, data=data
        )
        line = entry.format()
        with _lock_for(self.log_file):
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(line + "\n")
                f.flush()
        logger.log(_CONSOLE_LEVELS.get(entry.level, logging.INFO), line)
        return entry

    def info(self, message: str, data: Any = None) -> None:
        self.log(Level.INFO, message, data)

    def error(self, message: str, error: Any = None) -> None:
        self.log(Level.ERROR, message, error)

    def warn(self, message: str, data: Any = None) -> None:
        self.log(Level.WARN, message, data)

    def debug(self, message: str, data: Any = None) -> None:
        self.log(Level.DEBUG, message, data)

    def success(self, message: str, data: Any = None) -> None:
        self.log(Level.SUCCESS, message, data)

    def step(self, step_number: int, description: str) -> None:
        self.log(Level.STEP, f"[Step {step_number}] {description}")

    def test_start(self, test_name: str) -> None:
        self.log(Level.TEST, f"========== TEST START: {test_name} ==========")

    def test_end(self, test_name: str, status: str) -> None:
        if status not in TEST_STATUSES:
            raise ValueError(f"status must be one of {TEST_STATUSES}, got {status!r}")
        self.log(Level.TEST, f"========== TEST END: {test_name} - {status} ==========")

    @contextmanager
    def track(self, test_name: str) -> Iterator["RunLogger"]:
        """Frame a block with TEST START/END; failures are logged and re-raised."""
        self.test_start(test_name)
        try:
            yield self
        except Exception as e:
            self.error("Test failed", e)
            self.test_end(test_name, "FAILED")
            raise
        self.test_end(test_name, "PASSED")

    def get_log_file_path(self) -> Path:
        return self.log_file


def create_logger(test_name: str = "general", log_dir: Optional[str] = None) -> RunLogger:
    return RunLogger(test_name, log_dir)
