"""Process-wide usage accounting for status queries."""

import threading
from dataclasses import dataclass

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class UsageSnapshot:
    total_queries: int = 0
    primary_source_hits: int = 0
    fallback_hits: int = 0

    @property
    def success_rate(self) -> float:
        """Share of queries answered from outage reports, as a percentage (one decimal)."""
        if self.total_queries == 0:
            return 0
        return round(self.primary_source_hits / self.total_queries * 100, 1)


class UsageCounters:
    """Lock-protected tallies shared by every in-flight query.

    Created once per process and handed to the resolver. The total is only
    bumped together with one of the per-source counters, so
    ``total == primary + fallback`` holds after every completed query.
    """

    def __init__(self, log_interval: int = 10):
        self._lock = threading.Lock()
        self._log_interval = log_interval
        self._total = 0
        self._primary = 0
        self._fallback = 0

    def record_primary(self) -> UsageSnapshot:
        with self._lock:
            self._primary += 1
            self._total += 1
            snap = self._snapshot_locked()
        self._maybe_log(snap)
        return snap

    def record_fallback(self) -> UsageSnapshot:
        with self._lock:
            self._fallback += 1
            self._total += 1
            snap = self._snapshot_locked()
        self._maybe_log(snap)
        return snap

    def snapshot(self) -> UsageSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> UsageSnapshot:
        return UsageSnapshot(
            total_queries=self._total,
            primary_source_hits=self._primary,
            fallback_hits=self._fallback,
        )

    def _maybe_log(self, snap: UsageSnapshot) -> None:
        if self._log_interval <= 0 or snap.total_queries % self._log_interval != 0:
            return
        rate = snap.success_rate
        logger.info(
            "usage_statistics",
            total_requests=snap.total_queries,
            downdetector_api=snap.primary_source_hits,
            downdetector_api_pct=rate,
            http_fallback=snap.fallback_hits,
            http_fallback_pct=round(100 - rate, 1),
        )
