"""
Request timing spans

Every pipeline request records named spans (classify, storyline, media, ...)
and reports them as ``{span: duration_ms, "total": duration_ms}``. Spans that
were started but never ended are left out of the report.
"""

import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional

from .logging import get_logger

logger = get_logger(__name__, component="timer")


class Timer:
    """Collects named timing spans for one request"""

    def __init__(self, request_id: str, clock: Callable[[], float] = time.perf_counter):
        self.request_id = request_id
        self._clock = clock
        self._started_at = clock()
        self._starts: Dict[str, float] = {}
        self._durations: Dict[str, int] = {}

    def start(self, label: str) -> None:
        self._starts[label] = self._clock()
        logger.debug(f"START: {label}", extra={"span": label})

    def end(self, label: str) -> int:
        """End a span and return its duration in ms (0 if it was never started)"""
        started = self._starts.get(label)
        if started is None:
            return 0
        duration = int(round((self._clock() - started) * 1000))
        self._durations[label] = duration
        logger.debug(f"END: {label} ({duration}ms)", extra={"span": label, "duration_ms": duration})
        return duration

    @contextmanager
    def span(self, label: str) -> Iterator[None]:
        """Time a block; the span is recorded even if the block raises"""
        self.start(label)
        try:
            yield
        finally:
            self.end(label)

    def total_ms(self) -> int:
        return int(round((self._clock() - self._started_at) * 1000))

    def timings(self) -> Dict[str, int]:
        report = dict(self._durations)
        report["total"] = self.total_ms()
        return report

    def log_summary(self, message: Optional[str] = None) -> Dict[str, int]:
        report = self.timings()
        logger.info(message or "Timing summary", extra={"timings": report})
        return report
