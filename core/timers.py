"""core/timers.py — Frame continuations and game-time timers.

The host owns one ``TimerScheduler``.  Plugins use it two ways::

    timers.add_timer(20.0, regen, repeat=True, owner=plugin)
    timers.next_frame(lambda: check_projectile(eid))

Timers sit in a priority queue ordered by due time; the host calls
``tick(now)`` once per frame after it has run the continuations queued
by ``next_frame()`` during the previous frame.
"""

from __future__ import annotations
import heapq
import traceback
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(order=True)
class Timer:
    """A single entry in the timer priority queue.

    Ordered by ``due`` so the heap gives us earliest-first.
    """
    due: float
    # heapq tiebreaker (insertion order) — avoids comparing callbacks
    _seq: int = field(compare=True, repr=False)
    interval: float = field(compare=False, default=0.0)
    callback: Callable[[], Any] = field(compare=False, default=None, repr=False)
    repeat: bool = field(compare=False, default=False)
    owner: Any = field(compare=False, default=None, repr=False)
    killed: bool = field(compare=False, default=False)
    fired: int = field(compare=False, default=0)


class TimerScheduler:
    """Priority-queue timer service plus the next-frame continuation list.

    Stored as a world resource on the ECS World.
    """

    def __init__(self) -> None:
        self._queue: list[Timer] = []
        self._seq: int = 0
        self._next_frame: list[Callable[[], Any]] = []
        self.timers_fired: int = 0

    # ── Timers ───────────────────────────────────────────────────────

    def add_timer(self, interval: float, callback: Callable[[], Any], *,
                  now: float = 0.0, repeat: bool = False,
                  owner: Any = None) -> Timer:
        """Run *callback* ``interval`` seconds after *now*."""
        if interval <= 0:
            raise ValueError(f"timer interval must be positive, got {interval!r}")
        self._seq += 1
        timer = Timer(
            due=now + interval,
            _seq=self._seq,
            interval=interval,
            callback=callback,
            repeat=repeat,
            owner=owner,
        )
        heapq.heappush(self._queue, timer)
        return timer

    def kill(self, timer: Timer) -> None:
        timer.killed = True

    def kill_owner(self, owner: Any) -> int:
        """Kill every live timer registered by *owner*. Returns count killed."""
        count = 0
        for timer in self._queue:
            if timer.owner is owner and not timer.killed:
                timer.killed = True
                count += 1
        return count

    # ── Next-frame continuations ─────────────────────────────────────

    def next_frame(self, callback: Callable[[], Any]) -> None:
        """Queue *callback* to run once at the start of the next frame."""
        self._next_frame.append(callback)

    def run_next_frame(self) -> int:
        """Run continuations queued before this call.

        Anything queued while they run waits for the frame after.
        """
        batch = self._next_frame
        self._next_frame = []
        for callback in batch:
            self._invoke(callback, "next-frame")
        return len(batch)

    # ── Tick ─────────────────────────────────────────────────────────

    def tick(self, now: float) -> int:
        """Fire every timer due at or before *now*.  Returns count fired."""
        count = 0
        while self._queue:
            if self._queue[0].killed:
                heapq.heappop(self._queue)
                continue
            if self._queue[0].due > now:
                break

            timer = heapq.heappop(self._queue)
            self._invoke(timer.callback, "timer")
            timer.fired += 1
            count += 1

            if timer.repeat and not timer.killed:
                timer.due += timer.interval
                # A stalled host skips missed firings instead of bursting
                if timer.due <= now:
                    timer.due = now + timer.interval
                heapq.heappush(self._queue, timer)

        self.timers_fired += count
        return count

    # ── Queries ──────────────────────────────────────────────────────

    def active_timers(self, owner: Any = None) -> list[Timer]:
        return [t for t in self._queue
                if not t.killed and (owner is None or t.owner is owner)]

    def pending_continuations(self) -> int:
        return len(self._next_frame)

    def peek_time(self) -> float:
        """Return the due time of the next live timer, or inf if empty."""
        while self._queue and self._queue[0].killed:
            heapq.heappop(self._queue)
        if self._queue:
            return self._queue[0].due
        return float("inf")

    # ── Internal ─────────────────────────────────────────────────────

    @staticmethod
    def _invoke(callback: Callable[[], Any], kind: str) -> None:
        try:
            callback()
        except Exception as exc:
            print(f"[TIMER] {kind} callback error: {exc}")
            traceback.print_exc()
