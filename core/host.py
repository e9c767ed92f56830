"""
core/host.py — Headless game-server host

Owns the world, the event bus, the timer service and the player roster,
and drives them one frame at a time.  Plugins never touch the loop;
they subscribe to events, add timers and call the host API.

    host = Host(max_players=10)
    alice = host.connect("alice")
    host.complete_connection(alice)     # emits PlayerConnectFull
    host.run_frame(1 / 64)

Frame order (one pass of ``run_frame``):
  1. advance GameClock; drop last frame's replication marks
  2. run continuations queued by ``next_frame()`` last frame
  3. fire due timers
  4. drain the event bus
  5. carry out kicks requested this frame, then deliver the
     PlayerDisconnected events they raise
  6. purge destroyed entities
"""

from __future__ import annotations
import shlex
from typing import Any, Callable

import pygame

from core.ecs import World
from core.events import EventBus, EntitySpawned, PlayerConnectFull, PlayerDisconnected
from core.timers import Timer, TimerScheduler
from components import (
    ConnectionState, Session, Pawn, Identity,
    GameClock, ServerInfo, NetworkState, DecisionLog,
)


class Host:
    def __init__(self, name: str = "server", max_players: int = 10, tick_rate: int = 64):
        self.world = World()
        self.tick_rate = tick_rate
        self.running = False
        self.console: list[str] = []

        self.bus = EventBus()
        self.timers = TimerScheduler()
        self.world.set_res(self.bus)
        self.world.set_res(self.timers)
        self.world.set_res(GameClock())
        self.world.set_res(ServerInfo(name=name, max_players=max_players))
        self.world.set_res(NetworkState())
        self.world.set_res(DecisionLog())

        self._next_user_id = 0
        self._pending_kicks: list[tuple[int, str]] = []

    # -- Server facts --

    @property
    def max_players(self) -> int:
        return self.world.res(ServerInfo).max_players

    @max_players.setter
    def max_players(self, value: int):
        self.world.res(ServerInfo).max_players = value

    @property
    def time(self) -> float:
        return self.world.res(GameClock).time

    def print_to_console(self, msg: str) -> None:
        print(msg)
        self.console.append(msg)

    # -- Roster --

    def connect(self, name: str, *, bot: bool = False, user_id: int | None = None) -> int:
        """Begin a connection.  Returns the controller entity id."""
        if user_id is None:
            user_id = self._next_user_id
        self._next_user_id = max(self._next_user_id, user_id + 1)
        eid = self.world.spawn()
        self.world.add(eid, Identity(name=name, designer_name="cs_player_controller"))
        self.world.add(eid, Session(user_id=user_id, name=name, is_bot=bot))
        return eid

    def complete_connection(self, eid: int) -> None:
        session = self.world.get(eid, Session)
        if session is None:
            raise ValueError(f"entity {eid} is not a session")
        session.state = ConnectionState.CONNECTED
        session.connected_time = self.time
        self.bus.emit(PlayerConnectFull(eid=eid, user_id=session.user_id))

    def disconnect(self, eid: int, reason: str = "Disconnect") -> None:
        session = self.world.get(eid, Session)
        if session is None or session.state == ConnectionState.DISCONNECTED:
            return
        session.state = ConnectionState.DISCONNECTED
        if self.world.alive(session.pawn_eid):
            self.world.kill(session.pawn_eid)
            session.pawn_eid = -1
        self.world.kill(eid)
        self.bus.emit(PlayerDisconnected(eid=eid, user_id=session.user_id, reason=reason))

    def get_players(self) -> list[tuple[int, Session]]:
        """Every controller the host knows about, in connection order."""
        return list(self.world.query(Session))

    def find_user(self, user_id: int) -> int | None:
        for eid, session in self.world.query(Session):
            if session.user_id == user_id:
                return eid
        return None

    # -- Pawns --

    def spawn_pawn(self, session_eid: int, health: int = 100) -> int:
        session = self.world.get(session_eid, Session)
        if session is None:
            raise ValueError(f"entity {session_eid} is not a session")
        pawn = self.world.spawn()
        self.world.add(pawn, Identity(name=session.name, designer_name="player"))
        self.world.add(pawn, Pawn(controller_eid=session_eid, health=health))
        session.pawn_eid = pawn
        return pawn

    def kill_pawn(self, session_eid: int) -> None:
        """Mark the session's pawn dead.  The entity lingers, like a corpse."""
        session = self.world.get(session_eid, Session)
        if session is None:
            return
        pawn = self.world.get(session.pawn_eid, Pawn)
        if pawn is not None:
            pawn.alive = False
            pawn.health = 0

    # -- Entities --

    def spawn_entity(self, designer_name: str, *components: Any) -> int:
        """Create an entity and announce it on the bus."""
        eid = self.world.spawn()
        self.world.add(eid, Identity(name=designer_name, designer_name=designer_name))
        for comp in components:
            self.world.add(eid, comp)
        self.bus.emit(EntitySpawned(eid=eid, designer_name=designer_name))
        return eid

    def destroy_entity(self, eid: int) -> None:
        self.world.kill(eid)

    def set_state_changed(self, eid: int, class_name: str, field_name: str) -> None:
        """Flag a networked field as dirty so clients receive the new value."""
        self.world.res(NetworkState).mark(eid, class_name, field_name)

    # -- Plugin services --

    def subscribe(self, event_type: str, handler: Callable) -> None:
        self.bus.subscribe(event_type, handler)

    def unsubscribe(self, event_type: str, handler: Callable) -> bool:
        return self.bus.unsubscribe(event_type, handler)

    def add_timer(self, interval: float, callback: Callable[[], Any], *,
                  repeat: bool = False, owner: Any = None) -> Timer:
        return self.timers.add_timer(interval, callback, now=self.time,
                                     repeat=repeat, owner=owner)

    def next_frame(self, callback: Callable[[], Any]) -> None:
        self.timers.next_frame(callback)

    # -- Kicks --

    def kick(self, user_id: int, reason: str = "Kicked by server") -> bool:
        """Queue a disconnect for *user_id*.  Returns False if no such user."""
        if self.find_user(user_id) is None:
            return False
        self._pending_kicks.append((user_id, reason))
        return True

    def pending_kicks(self) -> set[int]:
        """User ids queued for a kick at the end of this frame."""
        return {user_id for user_id, _ in self._pending_kicks}

    def execute_command(self, command: str) -> bool:
        """Run a server console command.  Only ``kickid`` is understood."""
        argv = shlex.split(command)
        if not argv:
            return False
        if argv[0] != "kickid":
            raise ValueError(f"unknown console command: {argv[0]!r}")
        if len(argv) < 2:
            raise ValueError("usage: kickid <userid> [reason]")
        reason = argv[2] if len(argv) > 2 else "Kicked by server"
        return self.kick(int(argv[1]), reason)

    def _apply_kicks(self) -> int:
        kicks, self._pending_kicks = self._pending_kicks, []
        for user_id, reason in kicks:
            eid = self.find_user(user_id)
            if eid is not None:
                print(f"[HOST] Kicked user {user_id}: {reason}")
                self.disconnect(eid, reason)
        return len(kicks)

    # -- Main loop --

    def run_frame(self, dt: float | None = None) -> None:
        """Advance the server by one frame."""
        if dt is None:
            dt = 1.0 / self.tick_rate
        clock = self.world.res(GameClock)
        clock.time += dt
        clock.frame += 1
        self.world.res(NetworkState).flush()

        self.timers.run_next_frame()
        self.timers.tick(clock.time)
        self.bus.drain()
        if self._apply_kicks():
            self.bus.drain()
        self.world.purge()

    def run_frames(self, n: int, dt: float | None = None) -> None:
        for _ in range(n):
            self.run_frame(dt)

    def run(self, frames: int | None = None):
        """Real-time loop at ``tick_rate``.  Runs forever if *frames* is None."""
        clock = pygame.time.Clock()
        self.running = True
        done = 0
        while self.running and (frames is None or done < frames):
            dt = clock.tick(self.tick_rate) / 1000.0
            self.run_frame(dt)
            done += 1
        self.running = False

    def stop(self):
        self.running = False
