"""Frame-driven eased counters and ring transitions.

A ``FrameScheduler`` stands in for the display's refresh clock: callers
request one frame at a time and may cancel a pending frame through its handle.
Each animation instance owns its own start time, frame handle and generation
number; a tick whose generation is stale is dropped, so a retarget or a
dispose can never be overwritten by a frame scheduled before it.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import math
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


def ease_out_cubic(progress: float) -> float:
    """Decelerating curve: 0 at 0, 1 at 1."""
    progress = max(0.0, min(progress, 1.0))
    return 1 - (1 - progress) ** 3


def eased_count(target: float, elapsed_ms: float, duration_ms: float) -> float:
    """Counter value ``elapsed_ms`` into an animation toward ``target``.

    Floors while in flight and lands on exactly ``target`` once the duration
    has passed.
    """
    if target <= 0:
        return target
    if duration_ms <= 0 or elapsed_ms >= duration_ms:
        return target
    return math.floor(target * ease_out_cubic(max(elapsed_ms, 0.0) / duration_ms))


@dataclass(frozen=True)
class FrameHandle:
    id: int


class FrameScheduler(Protocol):
    def now(self) -> float:
        """Monotonic time in milliseconds."""

    def request_frame(self, callback: FrameCallback) -> FrameHandle:
        """Run ``callback(timestamp_ms)`` once, on the next frame."""

    def cancel_frame(self, handle: FrameHandle) -> None:
        """Drop a pending frame; unknown or already-run handles are ignored."""


class AsyncioFrameScheduler:
    """Frames on a running asyncio loop at ``frame_rate`` per second."""

    def __init__(
        self,
        frame_rate: int = 60,
        loop: asyncio.AbstractEventLoop | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.frame_interval = 1.0 / max(1, frame_rate)
        self._loop = loop
        self._clock = clock
        self._ids = itertools.count(1)
        self._pending: dict[int, asyncio.TimerHandle] = {}

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self._clock() * 1000

    def request_frame(self, callback: FrameCallback) -> FrameHandle:
        handle = FrameHandle(next(self._ids))
        self._pending[handle.id] = self.loop.call_later(
            self.frame_interval, self._fire, handle.id, callback
        )
        return handle

    def cancel_frame(self, handle: FrameHandle) -> None:
        timer = self._pending.pop(handle.id, None)
        if timer is not None:
            timer.cancel()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def _fire(self, handle_id: int, callback: FrameCallback) -> None:
        if self._pending.pop(handle_id, None) is None:
            return
        callback(self.now())


class ManualFrameScheduler:
    """Deterministic frames: time only moves when ``advance`` is called.

    Used to render keyframes offline and to drive animations in tests.
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = start_ms
        self._ids = itertools.count(1)
        self._pending: dict[int, FrameCallback] = {}

    def now(self) -> float:
        return self._now

    def request_frame(self, callback: FrameCallback) -> FrameHandle:
        handle = FrameHandle(next(self._ids))
        self._pending[handle.id] = callback
        return handle

    def cancel_frame(self, handle: FrameHandle) -> None:
        self._pending.pop(handle.id, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def advance(self, elapsed_ms: float) -> int:
        """Move the clock and run every frame pending before the move.

        Frames requested by those callbacks wait for the next ``advance``.
        Returns the number of callbacks run.
        """
        self._now += elapsed_ms
        due, self._pending = self._pending, {}
        for callback in due.values():
            callback(self._now)
        return len(due)


class AnimationState(StrEnum):
    IDLE = "idle"
    ANIMATING = "animating"
    SETTLED = "settled"


class _FrameLoop(ABC):
    """Generation-guarded, self-rescheduling frame loop shared by the animations."""

    def __init__(
        self,
        scheduler: FrameScheduler,
        duration_ms: float,
        on_update: Callable[[float], None] | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.duration_ms = duration_ms
        self.on_update = on_update
        self.state = AnimationState.IDLE
        self.started_at: float | None = None
        self._generation = 0
        self._handle: FrameHandle | None = None
        self._disposed = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def disposed(self) -> bool:
        return self._disposed

    def cancel(self) -> None:
        """Stop the in-flight loop; the displayed value stays where it is."""
        self._generation += 1
        if self._handle is not None:
            self.scheduler.cancel_frame(self._handle)
            self._handle = None

    def dispose(self) -> None:
        """Unmount: cancel and refuse further targets."""
        self.cancel()
        self._disposed = True

    def _start(self) -> None:
        self.cancel()
        self.started_at = self.scheduler.now()
        self.state = AnimationState.ANIMATING
        self._schedule(self._generation)

    def _schedule(self, generation: int) -> None:
        self._handle = self.scheduler.request_frame(lambda now: self._tick(generation, now))

    def _tick(self, generation: int, now: float) -> None:
        if generation != self._generation or self._disposed:
            logger.debug("Dropped stale animation frame (generation %s)", generation)
            return
        self._handle = None
        elapsed = now - (self.started_at if self.started_at is not None else now)
        if elapsed >= self.duration_ms:
            self.state = AnimationState.SETTLED
            self._render(self.duration_ms)
            return
        self._render(elapsed)
        self._schedule(generation)

    @abstractmethod
    def _render(self, elapsed_ms: float) -> None:
        """Update the displayed value for ``elapsed_ms`` into the animation."""

    def _emit(self, value: float) -> None:
        if self.on_update is not None:
            self.on_update(value)


class CountUpAnimation(_FrameLoop):
    """Counts from 0 to a target with a cubic ease-out.

    ``Idle`` until a positive target arrives, ``Animating`` while frames run,
    ``Settled`` once the displayed value equals the target. Every new target
    restarts from 0.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        duration_ms: float = 1000,
        on_update: Callable[[float], None] | None = None,
    ) -> None:
        super().__init__(scheduler, duration_ms, on_update)
        self.target: float = 0
        self.displayed: float = 0

    def set_target(self, target: float) -> None:
        if self._disposed:
            raise RuntimeError("Cannot retarget a disposed animation")
        self.target = target
        if target <= 0:
            self.cancel()
            self.state = AnimationState.IDLE
            self.started_at = None
            self.displayed = target
            self._emit(target)
            return
        self.displayed = 0
        self._emit(0)
        self._start()

    def _render(self, elapsed_ms: float) -> None:
        self.displayed = eased_count(self.target, elapsed_ms, self.duration_ms)
        self._emit(self.displayed)


class RingTransition(_FrameLoop):
    """Eases a ring's arc length from where it currently is to a new length."""

    def __init__(
        self,
        scheduler: FrameScheduler,
        duration_ms: float = 1000,
        on_update: Callable[[float], None] | None = None,
    ) -> None:
        super().__init__(scheduler, duration_ms, on_update)
        self.origin: float = 0.0
        self.target: float = 0.0
        self.displayed: float = 0.0

    def set_target(self, arc_length: float) -> None:
        if self._disposed:
            raise RuntimeError("Cannot retarget a disposed animation")
        self.origin = self.displayed
        self.target = max(arc_length, 0.0)
        if self.origin == self.target:
            self.cancel()
            self.state = AnimationState.SETTLED
            return
        self._start()

    def _render(self, elapsed_ms: float) -> None:
        if elapsed_ms >= self.duration_ms or self.duration_ms <= 0:
            self.displayed = self.target
        else:
            progress = ease_out_cubic(elapsed_ms / self.duration_ms)
            self.displayed = self.origin + (self.target - self.origin) * progress
        self._emit(self.displayed)


def counter_keyframes(target: float, duration_ms: float, frame_rate: int = 60) -> list[float]:
    """Step a fresh counter frame by frame and collect every displayed value.

    The first keyframe is the value shown at t=0; the last is ``target``.
    """
    scheduler = ManualFrameScheduler()
    frames: list[float] = []
    counter = CountUpAnimation(scheduler, duration_ms=duration_ms, on_update=frames.append)
    counter.set_target(target)
    frame_ms = 1000 / max(1, frame_rate)
    while counter.state == AnimationState.ANIMATING:
        scheduler.advance(frame_ms)
    counter.dispose()
    return frames
