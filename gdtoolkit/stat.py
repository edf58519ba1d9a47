"""Per-command call statistics, aggregated and written to a stat file periodically."""

from __future__ import annotations

import contextlib
import logging
import os
import queue
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, BinaryIO

from gdtoolkit.misc import func_name

_log = logging.getLogger(__name__)

SEP = "$$$"
MAX_STAT_FILE_SIZE = 100 * 1024 * 1024
MAX_STAT_FILE_COUNT = 10
QUEUE_SIZE = 4096

_US_PER_MS = 1000
_INT32_MAX = 2**31 - 1
_INT64_MAX = 2**63 - 1
_GT10_US = 10 * _US_PER_MS
_GT100_US = 100 * _US_PER_MS
_GT500_US = 500 * _US_PER_MS
_DATE_LAYOUT = "%Y-%m-%d %H:%M:%S"
_SEPARATOR_LINE = (
    "----------------------------------------------------------------------------------------\n"
)


@dataclass
class StatValue:
    """Aggregated figures for one command and result code; durations in microseconds."""

    total: int = 0
    sum_val: int = 0
    avg: int = 0
    max: int = 0
    min: int = 0
    gt10: int = 0
    gt100: int = 0
    gt500: int = 0
    total_d: int = 0


def _error_code(err: Any) -> int:
    if err is None:
        return 0
    code = getattr(err, "code", None)
    if code is not None:
        value = code() if callable(code) else code
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    if isinstance(err, BaseException):
        return -1
    return -2


class Stat:
    """One timed call of a command."""

    def __init__(self) -> None:
        self.cmd = ""
        self.started: datetime | None = None
        self.ended: datetime | None = None
        self.ret = 0

    def begin(self, cmd: str) -> "Stat":
        """Start timing cmd now."""
        return self.begin_at(cmd, datetime.now())

    def begin_at(self, cmd: str, begin: datetime) -> "Stat":
        """Start timing cmd from the given moment."""
        self.cmd = cmd
        self.started = begin
        return self

    def begin_func_cmd(self) -> "Stat":
        """Start timing now, using the calling function's name as the command."""
        self.cmd = func_name(2)
        self.started = datetime.now()
        return self

    def end(self, ret: int) -> None:
        """Stop timing with result code ret and hand the stat to the manager."""
        self.ret = ret
        self.ended = datetime.now()
        manager = _stat_mgr
        if manager is None:
            _log.error("StatMgr is not init.")
        else:
            manager.add_stat(self)

    def end_err(self, err: Any) -> None:
        """Stop timing; the code comes from err (0 for None, -1 for other errors)."""
        self.end(_error_code(err))

    def elapse(self) -> timedelta:
        """Time between begin and end."""
        if self.started is None or self.ended is None:
            raise ValueError("stat has not been begun and ended")
        return self.ended - self.started

    def _duration_us(self) -> int:
        return self.elapse() // timedelta(microseconds=1)


def _open_append(path: str, flags: int) -> int:
    return os.open(path, flags, 0o666)


class StatMgr:
    """Collects stats and periodically writes a summary table to a file."""

    def __init__(self) -> None:
        self.values: dict[str, StatValue] = {}
        self.max_cmd_len = 0
        self.stat_gap = 0.0
        self._file: BinaryIO | None = None
        self._path = ""
        self._queue: queue.Queue[Stat] = queue.Queue(QUEUE_SIZE)
        self._lock = threading.RLock()

    def init(self, stat_path: str | os.PathLike[str], stat_gap: float | timedelta) -> None:
        """Open the stat file and start writing a summary every stat_gap seconds."""
        gap = stat_gap.total_seconds() if isinstance(stat_gap, timedelta) else float(stat_gap)
        if gap <= 0:
            raise ValueError(f"non-positive stat gap {stat_gap}")
        path = os.fspath(stat_path)
        try:
            file = open(path, "ab", opener=_open_append)
        except OSError as exc:
            _log.error("init stat file failed, %s", exc)
            return
        with self._lock:
            self._file = file
            self._path = path
            self.stat_gap = gap
        threading.Thread(target=self._run, args=(gap,), daemon=True, name="stat-mgr").start()

    def _run(self, gap: float) -> None:
        next_tick = time.monotonic() + gap
        while True:
            timeout = next_tick - time.monotonic()
            if timeout <= 0:
                try:
                    self.dump()
                except Exception:
                    _log.exception("stat dump failed")
                next_tick = max(next_tick + gap, time.monotonic())
                continue
            try:
                st = self._queue.get(timeout=timeout)
            except queue.Empty:
                continue
            self.record(st)

    def add_stat(self, st: Stat) -> None:
        """Queue a finished stat for aggregation."""
        self._queue.put(st)

    def record(self, st: Stat) -> None:
        """Add a finished stat to the aggregated figures."""
        duration = st._duration_us()
        key = f"{st.cmd}{SEP}{st.ret}"
        with self._lock:
            value = self.values.get(key)
            if value is None:
                value = StatValue(total=1, total_d=duration, max=duration, min=duration)
                self.values[key] = value
            else:
                value.max = max(value.max, duration)
                value.min = min(value.min, duration)
                value.total += 1
                value.total_d += duration
            self.max_cmd_len = max(self.max_cmd_len, len(st.cmd))
            if _GT10_US <= duration < _GT100_US:
                value.gt10 += 1
            elif _GT100_US <= duration < _GT500_US:
                value.gt100 += 1
            elif _GT500_US <= duration:
                value.gt500 += 1

    def dump(self) -> None:
        """Write the summary table for everything recorded so far, then forget it."""
        with self._lock:
            if not self.values:
                return
            if self._file is None:
                raise RuntimeError("stat manager has no open stat file")
            width = self.max_cmd_len
            lines = [
                f"===============PID {os.getpid()}, Statistic in {int(self.stat_gap)}s, "
                f"{datetime.now().strftime(_DATE_LAYOUT)}=====================\n",
                f"{''.ljust(width)}|{'RESULT':>8}|{'TOTAL':>8}|{'SUMVAL':>8}|{'AVG(ms)':>9}"
                f"|{'MAX(ms)':>9}|{'MIN(ms)':>9}|{'RECATMAX':<18}|{'>10.000ms':>11}"
                f"|{'>100.000ms':>11}|{'>500.000ms':>11}|\n",
            ]
            total = 0
            max_us = 0
            min_us = _INT64_MAX
            gt10 = gt100 = gt500 = 0
            for key in sorted(self.values):
                value = self.values.pop(key)
                parts = key.split(SEP)
                if len(parts) != 2:
                    _log.error("invalid stat key, %s", key)
                    continue
                cmd, ret_text = parts
                try:
                    ret = int(ret_text)
                except ValueError:
                    ret = _INT32_MAX
                avg = value.total_d / (value.total * _US_PER_MS)
                lines.append(
                    f"{cmd.ljust(width)}|{ret:8d}|{value.total:8d}|{0:8d}|{avg:9.3f}"
                    f"|{value.max / _US_PER_MS:9.3f}|{value.min / _US_PER_MS:9.3f}|{'':<18}"
                    f"|{value.gt10:11d}|{value.gt100:11d}|{value.gt500:11d}|\n"
                )
                total += value.total
                max_us = max(max_us, value.max)
                min_us = min(min_us, value.min)
                gt10 += max(value.gt10, 0)
                gt100 += max(value.gt100, 0)
                gt500 += max(value.gt500, 0)
            lines.append(_SEPARATOR_LINE)
            if min_us == _INT64_MAX:
                min_us = 0
            lines.append(
                f"{'ALL'.ljust(width)}|{0:8d}|{total:8d}|{0:8d}|{0.0:9.3f}"
                f"|{max_us / _US_PER_MS:9.3f}|{min_us / _US_PER_MS:9.3f}|{' ' * 18}"
                f"|{gt10:11d}|{gt100:11d}|{gt500:11d}|\n"
            )
            lines.append("\n")
            try:
                self._file.write("".join(lines).encode("utf-8"))
                self._file.flush()
            except OSError as exc:
                _log.error("write stat failed, %s", exc)
            else:
                self._rotate_file()

    def _rotate_file(self) -> None:
        assert self._file is not None
        try:
            size = os.fstat(self._file.fileno()).st_size
        except OSError:
            _log.error("stat %s failed.", self._path)
            return
        if size < MAX_STAT_FILE_SIZE:
            return
        self._file.close()
        for index in range(MAX_STAT_FILE_COUNT - 1, 0, -1):
            with contextlib.suppress(OSError):
                os.replace(f"{self._path}.{index}", f"{self._path}.{index + 1}")
        with contextlib.suppress(OSError):
            os.replace(self._path, f"{self._path}.1")
        try:
            self._file = open(self._path, "ab", opener=_open_append)
        except OSError as exc:
            self._file = None
            _log.error("rotate stat file failed: %s", exc)


_stat_mgr: StatMgr | None = None
_instance_lock = threading.Lock()


def stat_mgr_instance() -> StatMgr:
    """The process-wide stat manager, created on first use."""
    global _stat_mgr
    with _instance_lock:
        if _stat_mgr is None:
            _stat_mgr = StatMgr()
        return _stat_mgr