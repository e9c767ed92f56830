"""components.resources — World-level singletons (not per-entity)."""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class GameClock:
    """Monotonic game time — accumulated ``dt`` since server start.

    Source of connection timestamps and timer due times.  Advanced once
    per frame by the host.
    """
    time: float = 0.0
    frame: int = 0


@dataclass
class ServerInfo:
    """Static server facts plugins may read."""
    name: str = "server"
    max_players: int = 10


@dataclass
class NetworkState:
    """Replication invalidations raised during the current frame.

    Each entry is ``(eid, class_name, field_name)``; the host would send
    those fields to clients on the next snapshot.  The host flushes the
    list when a new frame starts.
    """
    changed: list[tuple[int, str, str]] = field(default_factory=list)

    def mark(self, eid: int, class_name: str, field_name: str) -> None:
        self.changed.append((eid, class_name, field_name))

    def for_eid(self, eid: int) -> list[tuple[str, str]]:
        return [(c, f) for e, c, f in self.changed if e == eid]

    def flush(self) -> list[tuple[int, str, str]]:
        out = self.changed
        self.changed = []
        return out
