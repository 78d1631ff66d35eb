"""Fixed-rate frame pacing for the server loop, with optional jitter statistics."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

_log = logging.getLogger(__name__)

Clock = Callable[[], int]


def _millisecond_clock() -> int:
    return time.monotonic_ns() // 1_000_000


@dataclass(frozen=True)
class JitterStats:
    """Jitter figures gathered over one reporting period, in milliseconds."""

    minimum: int
    maximum: int
    average: int
    count: int


class FrameTimer:
    """Paces a logic loop at ``target_fps`` frames per second.

    The server time advances by exactly one frame each time ``check_frame``
    lets a frame through, so a loop that falls behind catches up frame by frame.
    """

    def __init__(
        self,
        target_fps: int,
        *,
        clock: Optional[Clock] = None,
        measure_jitter: bool = False,
        report_fps: bool = False,
        report_jitter: bool = False,
    ) -> None:
        if target_fps <= 0:
            raise ValueError("target_fps must be positive")
        self.target_fps = target_fps
        self.frame_time = 1000 // target_fps
        self.clock: Clock = clock if clock is not None else _millisecond_clock
        self.measure_jitter_enabled = measure_jitter
        self.report_fps = report_fps
        self.report_jitter = report_jitter

        self.started = False
        self.standard_server_time = 0
        self.current_server_time = 0
        self.current_logic_time = 0
        self.fps = 0

        self.jitter = 0
        self._prev_io_time = 0
        self._reset_jitter()

    def _reset_jitter(self) -> None:
        self._min_jitter = 0
        self._max_jitter = 0
        self._total_jitter = 0
        self._jitter_count = 0

    def start(self) -> None:
        """Set the reference time to now; call once before the loop starts."""
        now = self.clock()
        self.standard_server_time = now
        self.current_server_time = now
        self.current_logic_time = now
        self._prev_io_time = now
        self.fps = 0
        self.jitter = 0
        self._reset_jitter()
        self.started = True

    def check_frame(self) -> bool:
        """Return True if a logic frame is due now, advancing server time by one frame."""
        if not self.started:
            raise RuntimeError("timer is not started")
        self.current_logic_time = self.clock()

        if self.measure_jitter_enabled:
            self.measure_jitter()

        if self.current_logic_time < self.current_server_time + self.frame_time:
            return False

        self.current_server_time += self.frame_time
        self.fps += 1

        if self.current_server_time - self.standard_server_time >= 1000:
            self.standard_server_time += 1000
            if self.report_fps:
                _log.info("Logic Frame %d", self.fps)
            self.fps = 0
            if self.report_jitter:
                self.report_jitter_stats()

        return True

    def measure_jitter(self) -> int:
        """Record how far the gap since the last call strays from one frame; return it."""
        now = self.clock()
        delay = now - self._prev_io_time
        self.jitter = abs(delay - self.frame_time)

        if self._jitter_count == 0:
            self._min_jitter = self.jitter
            self._max_jitter = self.jitter
        else:
            self._min_jitter = min(self._min_jitter, self.jitter)
            self._max_jitter = max(self._max_jitter, self.jitter)

        self._total_jitter += self.jitter
        self._jitter_count += 1
        self._prev_io_time = now
        return self.jitter

    def report_jitter_stats(self) -> Optional[JitterStats]:
        """Log and return the gathered jitter statistics, then reset them.

        Returns None when nothing was measured since the last report.
        """
        stats: Optional[JitterStats] = None
        if self._jitter_count > 0:
            stats = JitterStats(
                minimum=self._min_jitter,
                maximum=self._max_jitter,
                average=self._total_jitter // self._jitter_count,
                count=self._jitter_count,
            )
            _log.debug(
                "Jitter min %d ms, max %d ms, avg %d ms",
                stats.minimum,
                stats.maximum,
                stats.average,
            )
        self._reset_jitter()
        return stats