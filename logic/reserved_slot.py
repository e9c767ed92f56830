"""logic/reserved_slot.py — Make room for VIPs on a full server.

When a VIP finishes connecting and the connected count has reached
``max_players``, one non-VIP is kicked.  Target preference:

  1. the human non-VIP who connected most recently
     (long-standing players keep their seat)
  2. otherwise any non-VIP bot
  3. otherwise nobody; a server full of VIPs stays as it is

The arriving player and every VIP are never candidates.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Collection

from components import DecisionLog, Session
from core.events import HookResult
from logic.roster import connected_players

if TYPE_CHECKING:
    from core.ecs import World
    from core.events import PlayerConnectFull
    from core.host import Host
    from core.config import ConfigStore
    from logic.permissions import PrivilegeCheck


KICK_REASON = "Kicked to make room for a VIP"


def select_eviction_target(world: "World", arriving_eid: int,
                           privilege: "PrivilegeCheck", *,
                           leaving: Collection[int] = ()) -> tuple[int, Session] | None:
    """Pick the session to kick for *arriving_eid*, or None.

    *leaving* holds user ids already queued for a kick; they are on their
    way out and cannot be picked again.
    """
    arriving = world.get(arriving_eid, Session)
    arriving_uid = arriving.user_id if arriving is not None else None

    candidates = [
        (eid, s) for eid, s in connected_players(world)
        if eid != arriving_eid and s.user_id != arriving_uid
        and s.user_id not in leaving
    ]

    humans = [(eid, s) for eid, s in candidates
              if not s.is_bot and not privilege.is_privileged(s)]
    if humans:
        return max(humans, key=lambda c: c[1].connected_time)

    for eid, s in candidates:
        if s.is_bot and not privilege.is_privileged(s):
            return eid, s
    return None


class ReservedSlots:
    def __init__(self, host: "Host", privilege: "PrivilegeCheck", store: "ConfigStore"):
        self.host = host
        self.privilege = privilege
        self.store = store

    def on_player_connect_full(self, event: "PlayerConnectFull") -> HookResult:
        if not self.store.config.enable_reserved_slot:
            return HookResult.CONTINUE

        world = self.host.world
        if not world.alive(event.eid):
            return HookResult.CONTINUE
        arriving = world.get(event.eid, Session)
        if arriving is None:
            return HookResult.CONTINUE

        if not self.privilege.is_privileged(arriving):
            return HookResult.CONTINUE

        # Players already kicked this frame have freed their seat
        leaving = self.host.pending_kicks()
        seated = [s for _, s in connected_players(world) if s.user_id not in leaving]
        if len(seated) < self.host.max_players:
            return HookResult.CONTINUE

        target = select_eviction_target(world, event.eid, self.privilege,
                                        leaving=leaving)
        if target is None:
            return HookResult.CONTINUE

        target_eid, victim = target
        self.host.print_to_console(
            f"[VIP] Kicking {victim.name} to make room for VIP {arriving.name}.")
        log = world.res(DecisionLog)
        if log is not None:
            log.record(target_eid, "admission",
                       f"kicked {victim.name} for VIP {arriving.name}",
                       name=victim.name, t=self.host.time,
                       details={"target_user_id": victim.user_id,
                                "vip_user_id": arriving.user_id,
                                "bot": victim.is_bot})
        self.host.kick(victim.user_id, KICK_REASON)
        return HookResult.CONTINUE
