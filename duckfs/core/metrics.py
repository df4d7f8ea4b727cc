"""Rolling per-operation outcome windows served by ``/api/metrics``.

Each metric name owns a bounded window of recent samples. ``timed`` is the
usual entry point: it measures a block, records one sample when the block
exits and, when asked, logs a warning once the window looks unhealthy.
"""
from __future__ import annotations

from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
import logging
import time
from typing import Deque, Dict, Iterator, NamedTuple, Optional

logger = logging.getLogger(__name__)

MIN_ALERT_SAMPLES = 5


class Sample(NamedTuple):
    ok: bool
    duration_ms: int


@dataclass
class Timing:
    """Mutable outcome of one ``timed`` block.

    An exception escaping the block marks it failed; callers that learn
    about failure some other way (an HTTP status, say) set ``failed``.
    """

    failed: bool = False
    duration_ms: int = 0


class MetricWindow:
    """The most recent ``size`` samples recorded for one name."""

    def __init__(self, size: int) -> None:
        self._samples: Deque[Sample] = deque(maxlen=size)

    def __len__(self) -> int:
        return len(self._samples)

    def add(self, sample: Sample) -> None:
        self._samples.append(sample)

    @property
    def errors(self) -> int:
        return sum(1 for sample in self._samples if not sample.ok)

    @property
    def average_ms(self) -> int:
        if not self._samples:
            return 0
        return int(sum(sample.duration_ms for sample in self._samples) / len(self._samples))

    def summary(self) -> dict:
        total = len(self._samples)
        errors = self.errors
        return {
            "count": total,
            "errors": errors,
            "error_rate": round(errors / total, 3),
            "avg_ms": self.average_ms,
            "max_ms": max(sample.duration_ms for sample in self._samples),
        }


class MetricsCollector:
    def __init__(
        self,
        window_size: int = 200,
        *,
        alert_error_rate: float = 0.2,
        alert_avg_ms: int = 2000,
        alert_interval_s: float = 60,
    ) -> None:
        self._window_size = window_size
        self._alert_error_rate = alert_error_rate
        self._alert_avg_ms = alert_avg_ms
        self._alert_interval_s = alert_interval_s
        self._windows: Dict[str, MetricWindow] = {}
        self._last_alert: Dict[str, float] = {}

    def record(self, name: str, *, ok: bool, duration_ms: int) -> None:
        window = self._windows.get(name)
        if window is None:
            window = self._windows[name] = MetricWindow(self._window_size)
        window.add(Sample(ok=ok, duration_ms=max(duration_ms, 0)))

    @contextmanager
    def timed(self, name: Optional[str], *, alert: bool = False) -> Iterator[Timing]:
        """Time the block and record it under ``name``; ``None`` only measures."""
        timing = Timing()
        start = time.perf_counter()
        try:
            yield timing
        except BaseException:
            timing.failed = True
            raise
        finally:
            timing.duration_ms = int((time.perf_counter() - start) * 1000)
            if name is not None:
                self.record(name, ok=not timing.failed, duration_ms=timing.duration_ms)
                if alert and self.should_alert(name):
                    logger.warning("Metric alert for %s (slow or error rate)", name)

    def snapshot(self) -> dict:
        return {name: window.summary() for name, window in self._windows.items() if len(window)}

    def should_alert(self, name: str) -> bool:
        """True when ``name`` looks unhealthy and no alert fired recently."""
        window = self._windows.get(name)
        if window is None or len(window) < MIN_ALERT_SAMPLES:
            return False
        unhealthy = (
            window.errors / len(window) >= self._alert_error_rate
            or window.average_ms >= self._alert_avg_ms
        )
        if not unhealthy:
            return False
        now = time.monotonic()
        last = self._last_alert.get(name)
        if last is not None and now - last < self._alert_interval_s:
            return False
        self._last_alert[name] = now
        return True

    def reset(self) -> None:
        self._windows.clear()
        self._last_alert.clear()


metrics = MetricsCollector()
