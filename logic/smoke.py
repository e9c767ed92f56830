"""logic/smoke.py — Colored smoke for VIP throwers.

The host announces a smoke projectile before it has linked the thrower,
so each projectile goes through two states:

  PENDING   seen in ``EntitySpawned``; a check is queued for next frame
  RESOLVED  the check ran: thrower looked up, color applied or not

The check runs exactly once per projectile.  Between the two states the
projectile (or its thrower) may have been destroyed, so everything is
looked up again by id before it is touched.
"""

from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from components import SmokeProjectile
from logic.roster import controller_of, is_valid_player

if TYPE_CHECKING:
    from core.events import EntitySpawned
    from core.host import Host
    from core.config import ConfigStore
    from logic.permissions import PrivilegeCheck


SMOKE_DESIGNER_NAME = "smokegrenade_projectile"


class TintState(enum.Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


@dataclass
class TintRequest:
    eid: int
    state: TintState = TintState.PENDING
    applied: bool = False


class SmokeColorizer:
    def __init__(self, host: "Host", privilege: "PrivilegeCheck", store: "ConfigStore"):
        self.host = host
        self.privilege = privilege
        self.store = store
        self._pending: dict[int, TintRequest] = {}
        # Resolved ids, kept while the projectile lives so a repeated
        # spawn notice cannot start a second check
        self._resolved: set[int] = set()

    def on_entity_spawned(self, event: "EntitySpawned") -> None:
        if event.designer_name != SMOKE_DESIGNER_NAME:
            return
        if event.eid in self._pending or event.eid in self._resolved:
            return
        self._pending[event.eid] = TintRequest(event.eid)
        # Thrower is only linked after the current frame
        self.host.next_frame(lambda: self.resolve(event.eid))

    def resolve(self, eid: int) -> bool:
        """Run the deferred check for *eid*.  Returns True if a color was set."""
        request = self._pending.pop(eid, None)
        if request is None:
            return False
        request.state = TintState.RESOLVED
        request.applied = self._apply(eid)
        self._remember(eid)
        return request.applied

    def pending_count(self) -> int:
        return len(self._pending)

    def _remember(self, eid: int) -> None:
        world = self.host.world
        self._resolved = {e for e in self._resolved if world.alive(e)}
        if world.alive(eid):
            self._resolved.add(eid)

    def _apply(self, eid: int) -> bool:
        world = self.host.world
        if not world.alive(eid):
            return False
        smoke = world.get(eid, SmokeProjectile)
        if smoke is None:
            return False

        owner = controller_of(world, smoke.thrower_eid)
        if owner is None:
            return False
        controller_eid, session = owner
        if not is_valid_player(world, controller_eid):
            return False
        if not self.privilege.is_privileged(session):
            return False

        color = self.store.snapshot.color()
        if color is None:
            return False

        smoke.smoke_color = color
        self.host.set_state_changed(eid, "SmokeProjectile", "smoke_color")
        return True
