"""components.rendering — Entity identity and cosmetic state."""

from __future__ import annotations
from dataclasses import dataclass, field

from pygame.math import Vector3


@dataclass
class Identity:
    name: str = "unnamed"
    designer_name: str = ""    # host class name, e.g. "smokegrenade_projectile"


@dataclass
class SmokeProjectile:
    """A thrown smoke grenade.

    ``thrower_eid`` is the *pawn* that threw it.  The host links it one
    frame after the projectile spawns, so it reads -1 until then.
    ``smoke_color`` is the RGB the cloud is drawn with on clients.
    """
    thrower_eid: int = -1
    smoke_color: Vector3 = field(default_factory=lambda: Vector3(180, 180, 180))
