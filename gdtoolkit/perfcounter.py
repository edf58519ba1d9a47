"""Process-wide performance counters and latency timers, reported once a minute."""

from __future__ import annotations

import logging
import socket
import threading
import time
import urllib.error
import urllib.request
from collections import deque
from datetime import timedelta
from typing import Any, Callable, Iterable, Mapping, Sequence

from gdtoolkit.convert import slice_cutter
from gdtoolkit.misc import fatal_with_sms_alert, marshal

_log = logging.getLogger(__name__)

DEFAULT_SEND_COUNT_ONCE = 35
GO_PROJECTS_GOROUTINE_NUM = "go_projects_goroutine_num"
DEFAULT_AGENT_URL = "http://127.0.0.1:1988/v1/push"
REPORT_INTERVAL = 60.0
SAMPLE_SIZE = 1028
RATE_WINDOW = 60.0

_NS_PER_MS = 1_000_000
_PERCENTILES = (0.95, 0.99, 0.995, 0.999)
_PERCENTILE_LABELS = ("p95", "p99", "p995", "p999")
_MIN_REPORT_COUNT = 30

Updater = Callable[[], "Mapping[str, int] | None"]
SuffixDecider = Callable[[str], str]


def _to_ns(cost: timedelta | float) -> int:
    if isinstance(cost, timedelta):
        return ((cost.days * 86400 + cost.seconds) * 1_000_000 + cost.microseconds) * 1000
    return int(cost * 1_000_000_000)


def _percentile(values: Sequence[int], p: float) -> float:
    size = len(values)
    if size == 0:
        return 0.0
    pos = p * (size + 1)
    if pos < 1.0:
        return float(values[0])
    if pos >= size:
        return float(values[-1])
    lower = values[int(pos) - 1]
    upper = values[int(pos)]
    return lower + (pos - int(pos)) * (upper - lower)


class Timer:
    """Latency samples (nanoseconds) with a count of updates over the last minute."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._samples: deque[int] = deque(maxlen=SAMPLE_SIZE)
        self._events: deque[float] = deque()

    def _prune(self, now: float) -> None:
        while self._events and now - self._events[0] > RATE_WINDOW:
            self._events.popleft()

    def update(self, cost: timedelta | float) -> None:
        """Record one duration, given as a timedelta or in seconds."""
        nanos = _to_ns(cost)
        now = self._clock()
        with self._lock:
            self._samples.append(nanos)
            self._events.append(now)
            self._prune(now)

    def count(self) -> int:
        """Number of updates in the last minute."""
        with self._lock:
            self._prune(self._clock())
            return len(self._events)

    def percentiles(self, ps: Iterable[float]) -> list[float]:
        """The requested percentiles of the kept samples, in nanoseconds."""
        with self._lock:
            values = sorted(self._samples)
        return [_percentile(values, p) for p in ps]


_lock = threading.RLock()
_counters: dict[str, int] = {}
_timers: dict[str, Timer] = {}
_updater: Updater | None = None
_suffix_decider: SuffixDecider | None = None
_agent_url = DEFAULT_AGENT_URL
_active = False
_initialized = False
_closed = False
_stop = threading.Event()


def _no_suffix(key: str) -> str:
    return ""


def init() -> None:
    """Start the counters with the default agent and no initial keys."""
    init_perf_counter("", None, [])


def init_perf_counter(target: str, updater: Updater | None, init_keys: Iterable[str]) -> None:
    """Start the counters once; every call resets the suffix decider and sets the updater."""
    global _agent_url, _active, _initialized
    with _lock:
        if not _initialized:
            _initialized = True
            if target:
                _agent_url = target
            for key in init_keys:
                _counters[key] = 0
            _active = True
            threading.Thread(target=_walk, daemon=True, name="perfcounter-report").start()
    set_suffix_decider(_no_suffix)
    set_updater(updater)


def set_run_port(port: int) -> None:
    """Tag every reported key with the given port."""
    set_suffix_decider(lambda key: f"-{port}")


def set_suffix_decider(decider: SuffixDecider | None) -> None:
    """Set the function whose '-<port>' answer tags reported keys."""
    global _suffix_decider
    with _lock:
        _suffix_decider = decider


def set_updater(updater: Updater | None) -> None:
    """Set the function that supplies extra counters at every report."""
    global _updater
    with _lock:
        _updater = updater


def close_perf_counter() -> None:
    """Stop counting and reporting; this cannot be undone."""
    global _active, _closed
    with _lock:
        if _closed:
            return
        _closed = True
        _active = False
    _stop.set()


def cost_fail(key: str, value: int) -> None:
    """Count failures of the timer named key."""
    incr(key + ",sum=fail", value)


def error_incr(key: str, value: int) -> None:
    """Count an exception report for key."""
    incr(key + ",type=exceptionReport", value)


def incr(key: str, value: int) -> None:
    """Add value to the counter key; ignored unless the counters are running."""
    with _lock:
        if not _active:
            return
        _counters[key] = _counters.get(key, 0) + value


def cost(name: str, cost: timedelta | float) -> None:
    """Record a duration on the timer name; ignored unless the counters are running."""
    with _lock:
        if not _active:
            return
        timer = _timers.setdefault(name, Timer())
    timer.update(cost)


def _timer_counters() -> dict[str, int]:
    with _lock:
        timers = dict(_timers)
    derived: dict[str, int] = {}
    for name, timer in timers.items():
        if not name:
            continue
        count = timer.count()
        skip = count < _MIN_REPORT_COUNT
        prefix = "skipCost_ms_" if skip else "cost_ms_"
        derived[f"{name},sum=count"] = count
        for label, value in zip(_PERCENTILE_LABELS, timer.percentiles(_PERCENTILES)):
            derived[f"{name},sum={prefix}{label}"] = int(value) // _NS_PER_MS
        with _lock:
            failures = _counters.get(f"{name},sum=fail")
        if failures is not None and count > 0:
            rate_key = "skipFailRate" if skip else "failRate"
            derived[f"{name},sum={rate_key}"] = int(failures / count * 10000)
    return derived


def _run_port(decider: SuffixDecider | None) -> int:
    if decider is None:
        return -1
    suffix = decider("")
    if not suffix.startswith("-"):
        return -1
    try:
        port = int(suffix[1:])
    except ValueError:
        return -1
    return port if port > 0 else -1


def collect_report() -> list[dict[str, Any]]:
    """Build the report entries for every counter and reset the counters to zero."""
    derived = _timer_counters()
    with _lock:
        _counters.update(derived)
        updater = _updater
    if updater is not None:
        extra = updater()
        if extra:
            with _lock:
                _counters.update(extra)
    with _lock:
        _counters[GO_PROJECTS_GOROUTINE_NUM] = threading.active_count()
        decider = _suffix_decider
    try:
        hostname = socket.gethostname()
    except OSError:
        _log.error("get host name fail! no report send")
        return []
    timestamp = int(time.time())
    port = _run_port(decider)
    with _lock:
        snapshot = sorted(_counters.items())
        for key, _ in snapshot:
            _counters[key] = 0
    entries = []
    for key, value in snapshot:
        if port > 0:
            key = f"{key},port={port}"
        entries.append(
            {
                "metric": "gd",
                "endpoint": hostname,
                "timestamp": timestamp,
                "step": 60,
                "value": value,
                "counterType": "GAUGE",
                "tags": "attr=" + key,
            }
        )
    return entries


def _send_report(batch: list[dict[str, Any]]) -> None:
    body = marshal(batch)
    request = urllib.request.Request(
        _agent_url, data=body, headers={"Content-Type": "application/json"}, method="POST"
    )
    started = time.monotonic()
    status = 0
    text = ""
    error: BaseException | None = None
    try:
        with urllib.request.urlopen(request, timeout=REPORT_INTERVAL) as response:
            status = response.status
            text = response.read().decode("utf-8", errors="replace")
    except urllib.error.HTTPError as exc:
        status = exc.code
        text = exc.read().decode("utf-8", errors="replace")
        error = exc
    except OSError as exc:
        error = exc
    cost_ms = int((time.monotonic() - started) * 1000)
    params = body.decode("utf-8")
    if error is not None:
        _log.error(
            "report perfCounter fail,params=%s,status=%d,body=%s,err=%s,reportCost=%d",
            params, status, text, error, cost_ms,
        )
    else:
        _log.debug(
            "report perfCounter ok,params=%s,status=%d,body=%s,reportCost=%d",
            params, status, text, cost_ms,
        )


def _report() -> None:
    for batch in slice_cutter(collect_report(), DEFAULT_SEND_COUNT_ONCE):
        threading.Thread(target=_send_report, args=(batch,), daemon=True).start()


def _walk() -> None:
    while not _stop.wait(REPORT_INTERVAL):
        try:
            _report()
        except Exception as exc:
            fatal_with_sms_alert(f"perfcounter report failed: {exc}")