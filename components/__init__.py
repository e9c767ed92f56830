"""components — ECS component dataclasses, organised by domain.

Submodules
----------
session        ConnectionState, Session, Pawn
rendering      Identity, SmokeProjectile
resources      GameClock, ServerInfo, NetworkState
decision_log   DecisionLog

All public names are re-exported here so code can simply do
``from components import Session``.
"""

# ── Players ──────────────────────────────────────────────────────────
from components.session import ConnectionState, Session, Pawn

# ── Rendering ────────────────────────────────────────────────────────
from components.rendering import Identity, SmokeProjectile

# ── World resources / singletons ─────────────────────────────────────
from components.resources import GameClock, ServerInfo, NetworkState
from components.decision_log import DecisionLog

__all__ = [
    # session
    "ConnectionState", "Session", "Pawn",
    # rendering
    "Identity", "SmokeProjectile",
    # resources
    "GameClock", "ServerInfo", "NetworkState", "DecisionLog",
]
