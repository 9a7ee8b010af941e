from __future__ import annotations

"""In-process metrics for the simulation host.

Collects, behind one lock:
- simulation steps: real processing time per step, start-time jitter of the
  background loop, and the total game time advanced
- HTTP timings and status counts per method and route template
- named event counters (``production.iron``, ``fleet.arrived``, ...)
- named timers (``queue.build.planned_s``, ...)

``metrics`` is the shared instance; ``snapshot()`` returns plain JSON types.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class Stat:
    """Running duration statistics with a bounded window for percentiles."""

    count: int = 0
    total_s: float = 0.0
    min_s: float = float("inf")
    max_s: float = 0.0
    last_s: float = 0.0
    window: List[float] = field(default_factory=list)
    window_size: int = 256

    def add(self, duration_s: float) -> None:
        self.count += 1
        self.total_s += duration_s
        self.last_s = duration_s
        self.min_s = min(self.min_s, duration_s)
        self.max_s = max(self.max_s, duration_s)
        self.window.append(duration_s)
        if len(self.window) > self.window_size:
            del self.window[0]

    def percentile_ms(self, p: float) -> float:
        if not self.window:
            return 0.0
        ordered = sorted(self.window)
        idx = max(0, min(len(ordered) - 1, int(round(p / 100.0 * (len(ordered) - 1)))))
        return ordered[idx] * 1000.0

    def as_dict_ms(self) -> Dict[str, float | int]:
        return {
            "count": self.count,
            "total_ms": self.total_s * 1000.0,
            "avg_ms": (self.total_s / self.count * 1000.0) if self.count else 0.0,
            "min_ms": (self.min_s * 1000.0) if self.count else 0.0,
            "max_ms": self.max_s * 1000.0,
            "last_ms": self.last_s * 1000.0,
            "p95_ms": self.percentile_ms(95.0),
            "p99_ms": self.percentile_ms(99.0),
        }


class MetricsCollector:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.reset()

    def reset(self) -> None:
        """Drop everything collected so far."""
        with self._lock:
            self._http_stats: Dict[Tuple[str, str], Stat] = {}
            self._http_status_counts: Dict[Tuple[str, str], Dict[str, int]] = {}
            self._http_total = 0
            self._tick_stats = Stat()
            self._tick_jitter = Stat()
            self._tick_total = 0
            self._game_seconds = 0.0
            self._events: Dict[str, float] = {}
            self._timers: Dict[str, Stat] = {}
            self._start_monotonic = time.monotonic()
            self._start_time_s = time.time()

    def increment_event(self, key: str, count: float = 1) -> None:
        if not key:
            return
        with self._lock:
            self._events[key] = self._events.get(key, 0) + count

    def event_count(self, key: str) -> float:
        with self._lock:
            return self._events.get(key, 0)

    def record_http(self, method: str, route: str, status_code: int, duration_s: float) -> None:
        key = (method.upper(), route)
        with self._lock:
            stat = self._http_stats.get(key)
            if stat is None:
                stat = self._http_stats[key] = Stat()
            stat.add(duration_s)
            counts = self._http_status_counts.setdefault(key, {})
            counts[str(status_code)] = counts.get(str(status_code), 0) + 1
            self._http_total += 1

    def record_tick(self, duration_s: float, game_seconds: float = 0.0, jitter_s: Optional[float] = None) -> None:
        """Record one simulation step: real processing time and game time advanced."""
        with self._lock:
            self._tick_stats.add(duration_s)
            if jitter_s is not None:
                self._tick_jitter.add(abs(jitter_s))
            self._tick_total += 1
            self._game_seconds += max(0.0, game_seconds)

    def record_timer(self, name: str, duration_s: float) -> None:
        if not name:
            return
        with self._lock:
            stat = self._timers.get(name)
            if stat is None:
                stat = self._timers[name] = Stat()
            stat.add(float(duration_s))

    def uptime_s(self) -> float:
        return max(0.0, time.monotonic() - self._start_monotonic)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            by_route = {
                f"{method}:{route}": {
                    **stat.as_dict_ms(),
                    "status_counts": dict(self._http_status_counts.get((method, route), {})),
                }
                for (method, route), stat in self._http_stats.items()
            }
            return {
                "process": {
                    "started_at": self._start_time_s,
                    "uptime_s": self.uptime_s(),
                },
                "http": {
                    "total_count": self._http_total,
                    "by_route": by_route,
                },
                "simulation": {
                    "ticks": self._tick_total,
                    "game_seconds": self._game_seconds,
                    **self._tick_stats.as_dict_ms(),
                    "jitter": self._tick_jitter.as_dict_ms(),
                },
                "events": dict(self._events),
                "timers": {name: stat.as_dict_ms() for name, stat in self._timers.items()},
            }


metrics = MetricsCollector()

__all__ = ["metrics", "MetricsCollector", "Stat"]
