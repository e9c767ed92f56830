"""logic/regen.py — Passive HP regeneration for VIP players.

Runs from a repeating host timer.  Each firing walks the roster and
tops up every living, connected, human VIP by ``hp_regen_amount``,
never past ``HEALTH_CEILING`` and never downwards.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from logic.roster import players, is_valid_player, living_pawn

if TYPE_CHECKING:
    from core.host import Host
    from core.config import ConfigStore
    from logic.permissions import PrivilegeCheck


HEALTH_CEILING = 100


def regen_health(health: int, amount: int) -> int:
    """Saturating heal: ``min(ceiling, health + amount)``, unchanged at or above it."""
    if health >= HEALTH_CEILING:
        return health
    return min(HEALTH_CEILING, health + amount)


def regen_tick(host: "Host", privilege: "PrivilegeCheck", store: "ConfigStore") -> int:
    """Heal every eligible VIP once.  Returns the number of pawns healed."""
    world = host.world
    amount = store.config.hp_regen_amount
    healed = 0

    for eid, session in players(world):
        if not is_valid_player(world, eid):
            continue
        embodied = living_pawn(world, session)
        if embodied is None:
            continue
        if not privilege.is_privileged(session):
            continue

        pawn_eid, pawn = embodied
        if pawn.health >= HEALTH_CEILING:
            continue

        pawn.health = regen_health(pawn.health, amount)
        host.set_state_changed(pawn_eid, "Pawn", "health")
        healed += 1

    return healed
