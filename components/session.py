"""components.session — Connected players and their in-world pawns.

A player is two entities: the *controller* (``Session``), which exists
for as long as the connection does, and the *pawn* (``Pawn``), which
the host creates on spawn and destroys on death or disconnect.  The
two point at each other by entity id only.

Privilege is deliberately not a field here: it is asked of the
permission oracle every time, since it can change mid-session.
"""

from __future__ import annotations
import enum
from dataclasses import dataclass


class ConnectionState(str, enum.Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass
class Session:
    user_id: int = -1
    name: str = "unnamed"
    state: ConnectionState = ConnectionState.CONNECTING
    is_bot: bool = False
    connected_time: float = 0.0    # GameClock time the connection completed
    pawn_eid: int = -1             # -1 while not embodied

    @property
    def connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED


@dataclass
class Pawn:
    """In-world body of a session.

    ``health`` is an int HP value; 100 is the ceiling for regen.
    """
    controller_eid: int = -1
    health: int = 100
    alive: bool = True
