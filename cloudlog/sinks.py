"""Sinks that receive rendered Cloud Logging entries.

Provides :class:`StreamSink` (JSON lines to stdout or any text stream),
:class:`FileSink` (JSON lines appended to a file with cross-process
locking) and :class:`SubjectSink` (a reactive ``Subject`` forwarding
records to subscribers).

Every sink serializes its own writes, so one entry is never interleaved
with another.
"""

import json
import os
import sys
import threading
from contextlib import contextmanager
from io import TextIOWrapper
from typing import TextIO

try:
    import fcntl
except ImportError:  # pragma: no cover - Windows
    fcntl = None

from reactivex import Subject

from .record import RenderedRecord


def format_record_json(record: RenderedRecord) -> str:
    """
    Serialize a rendered record as one JSON line.

    Returns:
        JSON string (single line) with newline terminator.
    """
    return json.dumps(record.to_dict(), ensure_ascii=False, default=str) + "\n"


# =============================================================================
# Stream Sink
# =============================================================================


class StreamSink:
    """Write JSON lines to a text stream (stdout by default).

    Cloud Run and GKE pick up structured JSON from stdout and turn it into
    Cloud Logging entries.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        # Resolved late so pytest's capsys and redirect_stdout are honoured.
        return self._stream if self._stream is not None else sys.stdout

    def write(self, record: RenderedRecord) -> None:
        line = format_record_json(record)
        stream = self.stream
        with self._lock:
            stream.write(line)
            stream.flush()

    def __repr__(self) -> str:
        return f"StreamSink({self._stream!r})"


# =============================================================================
# File Sink
# =============================================================================


class FileSink:
    """
    Append JSON lines to a file.

    Features:
    - The file and its directory are created lazily on the first write.
    - Thread-safe within a process. On POSIX, writes are also serialized
      across processes with `fcntl.flock` on a sibling `.lock` file.

    Parameters:
        logfile: Path of the log file.
    """

    def __init__(self, logfile: str):
        self.logfile = logfile
        self._file: TextIOWrapper | None = None
        self._thread_lock = threading.Lock()

    def _lock_path(self) -> str:
        return f"{self.logfile}.lock"

    def _ensure_dir(self) -> None:
        dir_name = os.path.dirname(self.logfile)
        if dir_name:
            os.makedirs(dir_name, exist_ok=True)

    def _ensure_file_open(self) -> TextIOWrapper:
        if self._file is None or self._file.closed:
            self._ensure_dir()
            self._file = open(self.logfile, "a", encoding="utf-8")
        return self._file

    @contextmanager
    def _acquire_lock(self):
        """Cross-process file lock with waiting; a no-op without ``fcntl``."""
        if fcntl is None:
            yield
            return

        self._ensure_dir()
        with open(self._lock_path(), "a+") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

    def write(self, record: RenderedRecord) -> None:
        line = format_record_json(record)
        with self._thread_lock, self._acquire_lock():
            f = self._ensure_file_open()
            f.write(line)
            f.flush()

    def close(self) -> None:
        """Close the underlying file handle, if open."""
        with self._thread_lock:
            if self._file is not None and not self._file.closed:
                self._file.close()
            self._file = None

    def __repr__(self) -> str:
        return f"FileSink({self.logfile!r})"


# =============================================================================
# Subject Sink
# =============================================================================


class SubjectSink(Subject):
    """
    A ``Subject`` that forwards every rendered record to its subscribers.

    Useful for in-process fan-out, e.g. piping records through reactive
    operators before printing or shipping them. Subscribers run on the
    logging thread, and an exception raised by one propagates back to the
    log call.
    """

    def __init__(self) -> None:
        super().__init__()
        self._write_lock = threading.Lock()

    def write(self, record: RenderedRecord) -> None:
        with self._write_lock:
            self.on_next(record)

    def on_completed(self) -> None:
        """
        The sink never completes.
        """
        pass
