"""Frame timing: delta time, averaged frame rate and an optional frame cap."""

from __future__ import annotations

import math
import time
from collections import deque
from typing import Callable

NUM_SAMPLES = 60
DEFAULT_FPS = 60.0


class FrameRateManager:
    """Measures frame times and sleeps to hold frames at a target rate.

    ``clock`` returns seconds; ``sleep`` takes seconds.
    """

    def __init__(
        self,
        target_fps: float = 60.0,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self.max_fps = float(target_fps)
        self.fps = 0.0
        self.delta_time = 0.0
        self.frame_time = 0.0
        self._carry_over_delay = 0.0
        self._samples: deque[float] = deque(maxlen=NUM_SAMPLES)
        self._start_ticks = self._ticks()
        self._prev_ticks = self._start_ticks
        self._previous_time = clock()

    def _ticks(self) -> int:
        """Milliseconds of the clock, as whole numbers."""
        return math.floor(self._clock() * 1000.0)

    def set_target_fps(self, target_fps: float) -> None:
        """Set the frame rate that end_frame limits to."""
        self.max_fps = float(target_fps)

    def start_frame(self) -> float:
        """Begin a frame and return seconds since the previous frame began."""
        self._start_ticks = self._ticks()
        now = self._clock()
        self.delta_time = now - self._previous_time
        self._previous_time = now
        return self.delta_time

    def calculate_fps(self) -> None:
        """Update fps from the average of the last frame times."""
        current_ticks = self._ticks()
        self.frame_time = current_ticks - self._prev_ticks
        self._prev_ticks = current_ticks
        self._samples.append(self.delta_time * 1000.0)
        average = sum(self._samples) / len(self._samples)
        self.fps = 1000.0 / average if average > 0 else DEFAULT_FPS

    def end_frame(self) -> float:
        """Finish a frame, sleeping if it ran faster than the target; return fps."""
        self.calculate_fps()
        frame_ticks = self._ticks() - self._start_ticks
        budget = 1000.0 / self.max_fps
        remaining = budget - frame_ticks + self._carry_over_delay
        if budget > frame_ticks:
            delay_ms = max(0, int(remaining))
            if delay_ms:
                self._sleep(delay_ms / 1000.0)
        self._carry_over_delay = remaining - int(remaining)
        return self.fps