"""core/events.py — Lightweight event bus.

Decouples the host, which *announces* things (an entity was created, a
player finished connecting), from plugins that *react* to them.  The
bus lives as an ECS resource::

    from core.events import EventBus
    bus = world.res(EventBus)
    bus.emit(EntitySpawned(eid=42, designer_name="smokegrenade_projectile"))

Consumers subscribe with a callable::

    bus.subscribe("PlayerConnectFull", my_handler)

And the host drains once per frame::

    bus.drain()          # calls all handlers for pending events

Design rules:
  - Events are plain dataclasses — no behaviour.
  - ``emit()`` is O(1) (just appends).
  - ``drain()`` processes all queued events in FIFO order.
  - Handlers may emit new events; those are processed in the same drain.
  - A handler may return a ``HookResult``; ``STOP`` hides the event from
    handlers subscribed after it.
"""

from __future__ import annotations
import enum
import traceback
from dataclasses import dataclass
from typing import Any, Callable
from collections import defaultdict


# ═══════════════════════════════════════════════════════════════════
#  Event definitions
# ═══════════════════════════════════════════════════════════════════

@dataclass
class EntitySpawned:
    """The host created a world entity.

    Only the id and class name are guaranteed at this point; relations
    such as a projectile's thrower may still be unset.
    """
    eid: int
    designer_name: str = ""


@dataclass
class PlayerConnectFull:
    """A session finished connecting and now counts against capacity."""
    eid: int
    user_id: int = -1


@dataclass
class PlayerDisconnected:
    """A session left (or was kicked)."""
    eid: int
    user_id: int = -1
    reason: str = ""


class HookResult(enum.IntEnum):
    """What a handler wants the bus to do with the event afterwards."""
    CONTINUE = 0
    CHANGED = 1
    HANDLED = 3
    STOP = 4


# ═══════════════════════════════════════════════════════════════════
#  Event Bus
# ═══════════════════════════════════════════════════════════════════

class EventBus:
    """Fire-and-forget event bus stored as an ECS resource."""

    def __init__(self):
        self._queue: list[Any] = []
        self._subs: dict[str, list[Callable]] = defaultdict(list)
        self._stats: dict[str, int] = defaultdict(int)

    # ── Public API ───────────────────────────────────────────────────

    def emit(self, event) -> None:
        """Queue an event for processing on next ``drain()``."""
        self._queue.append(event)

    def subscribe(self, event_type: str, handler: Callable) -> None:
        """Register *handler* to receive events of *event_type*.

        *event_type* is the class name, e.g. ``"EntitySpawned"``.
        """
        self._subs[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: Callable) -> bool:
        """Remove *handler*.  Returns False if it was not subscribed."""
        handlers = self._subs.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def drain(self) -> int:
        """Process all queued events.  Returns number processed.

        Handlers may emit new events — those are processed in the
        same drain pass (breadth-first).
        """
        processed = 0
        safety = 1000  # prevent infinite loops
        while self._queue and safety > 0:
            batch = self._queue[:]
            self._queue.clear()
            for event in batch:
                self._dispatch(event)
            processed += len(batch)
            safety -= 1
        return processed

    def clear(self) -> None:
        """Discard all pending events."""
        self._queue.clear()

    def stats(self) -> dict[str, int]:
        """Return cumulative event counts by type."""
        return dict(self._stats)

    def pending_count(self) -> int:
        """Number of events waiting to be drained."""
        return len(self._queue)

    def handler_count(self, event_type: str) -> int:
        return len(self._subs.get(event_type, []))

    # ── Internal ─────────────────────────────────────────────────────

    def _dispatch(self, event) -> None:
        name = type(event).__name__
        self._stats[name] += 1
        # Copy: handlers may unsubscribe themselves mid-dispatch
        for handler in list(self._subs.get(name, [])):
            try:
                result = handler(event)
            except Exception as exc:
                print(f"[EVENT] handler error for {name}: {exc}")
                traceback.print_exc()
                continue
            if result == HookResult.STOP:
                break

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._queue)}, subs={len(self._subs)})"
