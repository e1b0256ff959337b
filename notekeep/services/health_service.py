"""
Notekeep Backend: Health Aggregator
====================================

What:  Combines the store connection state, a process memory snapshot and
       the process uptime into a HealthReport.
How:   evaluate_health() is a pure function of its inputs; probe_process()
       samples the running process with psutil. The route stitches the two
       together so the rules can be tested with fixed numbers.

Rules:
    healthy  ⇔  state == CONNECTED
                and rss_mb      < RSS_THRESHOLD_MB       (200)
                and heap_used_mb < HEAP_USED_THRESHOLD_MB (150)

    Thresholds are compared against the numeric megabyte values; the
    two-decimal strings exist only for display.

Process metrics mapping (psutil.Process().memory_info()):
    rss        → rss
    heap_total → vms
    heap_used  → rss - shared (process-private resident memory)
    external   → shared
    `shared` is reported on Linux; elsewhere it is 0 and heap_used == rss.

If psutil cannot read the process, metrics_unavailable_report() stands in
for evaluate_health() and the service reports unhealthy.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import psutil

from notekeep.schemas.health import (
    DatabaseStatus,
    HealthReport,
    MemoryUsage,
    MemoryWarnings,
)
from notekeep.store.base import ConnectionState

RSS_THRESHOLD_MB = 200
HEAP_USED_THRESHOLD_MB = 150

ACTIONABLE_PREFIX = "Please review the warnings and take the appropriate actions: "
DATABASE_SUGGESTION = "Check database connection. "
RSS_SUGGESTION = "Investigate high memory usage (RSS). "
HEAP_SUGGESTION = "Investigate high heap memory usage."
METRICS_SUGGESTION = "Check access to process metrics. "

METRICS_UNAVAILABLE = "unavailable"

_BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class MemorySnapshot:
    """Process memory figures in bytes."""

    rss: int
    heap_total: int
    heap_used: int
    external: int


@dataclass(frozen=True)
class ProcessMetrics:
    memory: MemorySnapshot
    uptime_seconds: float


def to_megabytes(num_bytes: float) -> float:
    """Bytes → MB, rounded to two decimal places."""
    return round(num_bytes / _BYTES_PER_MB, 2)


def _raw_megabytes(num_bytes: float) -> float:
    return num_bytes / _BYTES_PER_MB


def format_megabytes(megabytes: float) -> str:
    return f"{megabytes:.2f} MB"


def format_uptime(uptime_seconds: float) -> str:
    """Whole minutes and the remaining whole seconds, e.g. '3 minutes 12 seconds'."""
    minutes = int(uptime_seconds // 60)
    seconds = int(uptime_seconds % 60)
    return f"{minutes} minutes {seconds} seconds"


def _connection_message(is_connected: bool) -> str:
    if is_connected:
        return "Application is connected to the database"
    return "Application is not connected to the database"


def _database_status(state: ConnectionState) -> DatabaseStatus:
    is_connected = state == ConnectionState.CONNECTED
    return DatabaseStatus(
        state=state.label,
        is_connected=is_connected,
        suggestion=(
            "No action needed. The database is connected."
            if is_connected
            else "Check the database connection and restart the service if necessary."
        ),
    )


def _format_timestamp(now: datetime) -> str:
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def evaluate_health(
    state: ConnectionState,
    memory: MemorySnapshot,
    uptime_seconds: float,
    now: Optional[datetime] = None,
) -> HealthReport:
    """
    Build the health report for the given inputs.

    Args:
        state: store connection state
        memory: memory snapshot in bytes
        uptime_seconds: process uptime
        now: report timestamp (defaults to the current UTC time)

    Returns:
        HealthReport; `actionable_message` is set only when unhealthy.
    """
    now = now or datetime.now(timezone.utc)
    state = ConnectionState(state)
    is_connected = state == ConnectionState.CONNECTED

    rss_high = _raw_megabytes(memory.rss) >= RSS_THRESHOLD_MB
    heap_high = _raw_megabytes(memory.heap_used) >= HEAP_USED_THRESHOLD_MB
    rss_mb = to_megabytes(memory.rss)
    heap_used_mb = to_megabytes(memory.heap_used)

    healthy = is_connected and not rss_high and not heap_high

    if rss_high:
        rss_warning = (
            f"Warning: RSS memory usage ({format_megabytes(rss_mb)}) exceeds "
            f"the threshold of {RSS_THRESHOLD_MB} MB."
        )
    else:
        rss_warning = "Memory usage is within acceptable limits."

    if heap_high:
        heap_warning = (
            f"Warning: Heap used memory ({format_megabytes(heap_used_mb)}) exceeds "
            f"the threshold of {HEAP_USED_THRESHOLD_MB} MB."
        )
    else:
        heap_warning = "Heap memory usage is within acceptable limits."

    actionable_message = None
    if not healthy:
        actionable_message = ACTIONABLE_PREFIX
        if not is_connected:
            actionable_message += DATABASE_SUGGESTION
        if rss_high:
            actionable_message += RSS_SUGGESTION
        if heap_high:
            actionable_message += HEAP_SUGGESTION

    return HealthReport(
        status="healthy" if healthy else "unhealthy",
        message=_connection_message(is_connected),
        uptime=format_uptime(uptime_seconds),
        memory_usage=MemoryUsage(
            rss=format_megabytes(rss_mb),
            heap_total=format_megabytes(to_megabytes(memory.heap_total)),
            heap_used=format_megabytes(heap_used_mb),
            external=format_megabytes(to_megabytes(memory.external)),
        ),
        memory_warnings=MemoryWarnings(rss=rss_warning, heap_used=heap_warning),
        database=_database_status(state),
        timestamp=_format_timestamp(now),
        actionable_message=actionable_message,
    )


def probe_process(process: Optional[psutil.Process] = None) -> ProcessMetrics:
    """Sample memory and uptime of `process` (the current process by default)."""
    process = process or psutil.Process()
    info = process.memory_info()
    shared = getattr(info, "shared", 0)
    memory = MemorySnapshot(
        rss=info.rss,
        heap_total=info.vms,
        heap_used=max(info.rss - shared, 0),
        external=shared,
    )
    uptime = max(time.time() - process.create_time(), 0.0)
    return ProcessMetrics(memory=memory, uptime_seconds=uptime)


def metrics_unavailable_report(
    state: ConnectionState,
    now: Optional[datetime] = None,
) -> HealthReport:
    """
    Report for a process that could not be sampled (e.g. psutil.AccessDenied).

    Memory state is unknown, so the report is always unhealthy. The
    database suggestion still comes first when the store is down.
    """
    now = now or datetime.now(timezone.utc)
    state = ConnectionState(state)
    is_connected = state == ConnectionState.CONNECTED

    actionable_message = ACTIONABLE_PREFIX
    if not is_connected:
        actionable_message += DATABASE_SUGGESTION
    actionable_message += METRICS_SUGGESTION

    return HealthReport(
        status="unhealthy",
        message=_connection_message(is_connected),
        uptime=METRICS_UNAVAILABLE,
        memory_usage=MemoryUsage(
            rss=METRICS_UNAVAILABLE,
            heap_total=METRICS_UNAVAILABLE,
            heap_used=METRICS_UNAVAILABLE,
            external=METRICS_UNAVAILABLE,
        ),
        memory_warnings=MemoryWarnings(
            rss="Memory usage could not be sampled.",
            heap_used="Heap memory usage could not be sampled.",
        ),
        database=_database_status(state),
        timestamp=_format_timestamp(now),
        actionable_message=actionable_message,
    )
