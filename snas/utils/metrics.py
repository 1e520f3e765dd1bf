"""
Performance instrumentation.

PerformanceMetrics is an explicit accumulator owned by whoever creates it (a
request, a CLI run, a test) and passed to the prioritizer and content generator.
Exceeding the SLA is advisory: it is counted and flagged, never raised.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class PerformanceMetrics:
    """
    Rolling performance counters.

    Attributes:
        sla_ms: SLA threshold in milliseconds
        api_call_count: Number of recorded calls
        average_response_time_ms: Rolling mean of recorded call durations
        sla_violations: Calls whose duration exceeded sla_ms
        cache_hits: Content cache hits
        cache_misses: Content cache misses
    """

    sla_ms: int = 2000
    api_call_count: int = 0
    average_response_time_ms: float = 0.0
    sla_violations: int = 0
    cache_hits: int = 0
    cache_misses: int = 0

    def record_call(self, processing_time_ms: float) -> bool:
        """
        Record one call's duration.

        Returns:
            True if the call was within the SLA
        """
        self.api_call_count += 1
        total = self.api_call_count
        self.average_response_time_ms = (
            self.average_response_time_ms * (total - 1) + processing_time_ms
        ) / total

        compliant = self.is_sla_compliant(processing_time_ms)
        if not compliant:
            self.sla_violations += 1
        return compliant

    def is_sla_compliant(self, processing_time_ms: float) -> bool:
        return processing_time_ms <= self.sla_ms

    def record_cache_hit(self) -> None:
        self.cache_hits += 1

    def record_cache_miss(self) -> None:
        self.cache_misses += 1

    @property
    def cache_hit_ratio(self) -> float:
        lookups = self.cache_hits + self.cache_misses
        return self.cache_hits / lookups if lookups else 0.0

    def snapshot(self) -> Dict[str, Any]:
        """Return counters as a plain dict (for responses and reports)."""
        return {
            "api_call_count": self.api_call_count,
            "average_response_time_ms": round(self.average_response_time_ms, 2),
            "sla_ms": self.sla_ms,
            "sla_violations": self.sla_violations,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "cache_hit_ratio": round(self.cache_hit_ratio, 3),
        }


class Stopwatch:
    """
    Wall-clock timer in milliseconds.

    Usage:
        with Stopwatch() as watch:
            do_work()
        watch.elapsed_ms
    """

    def __init__(self, timer=time.perf_counter):
        self._timer = timer
        self._start = None
        self._end = None

    def __enter__(self) -> "Stopwatch":
        self._start = self._timer()
        self._end = None
        return self

    def __exit__(self, *exc_info) -> None:
        self._end = self._timer()

    @property
    def elapsed_ms(self) -> int:
        """Elapsed milliseconds (live reading while still running)."""
        end = self._end if self._end is not None else self._timer()
        return int(round((end - self._start) * 1000))
