"""logic/roster.py — Read-only views of the live player roster.

Every function re-reads the world; callers get a fresh snapshot per
invocation and should not hold on to it across frames.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components import Session, Pawn

if TYPE_CHECKING:
    from core.ecs import World


def players(world: "World") -> list[tuple[int, Session]]:
    """Every live controller entity, in connection order."""
    return list(world.query(Session))


def connected_players(world: "World") -> list[tuple[int, Session]]:
    return [(eid, s) for eid, s in world.query(Session) if s.connected]


def is_valid_player(world: "World", eid: int) -> bool:
    """A live, connected, human session."""
    if not world.alive(eid):
        return False
    session = world.get(eid, Session)
    return session is not None and not session.is_bot and session.connected


def living_pawn(world: "World", session: Session) -> tuple[int, Pawn] | None:
    """``(pawn_eid, Pawn)`` if the session is currently embodied and alive."""
    if not world.alive(session.pawn_eid):
        return None
    pawn = world.get(session.pawn_eid, Pawn)
    if pawn is None or not pawn.alive:
        return None
    return session.pawn_eid, pawn


def controller_of(world: "World", pawn_eid: int) -> tuple[int, Session] | None:
    """``(controller_eid, Session)`` driving *pawn_eid*, or None."""
    if not world.alive(pawn_eid):
        return None
    pawn = world.get(pawn_eid, Pawn)
    if pawn is None or not world.alive(pawn.controller_eid):
        return None
    session = world.get(pawn.controller_eid, Session)
    if session is None:
        return None
    return pawn.controller_eid, session
