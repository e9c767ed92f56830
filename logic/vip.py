"""logic/vip.py — The VIP plugin: wiring and lifecycle.

Usage::

    plugin = VipPlugin(host, AdminRegistry.from_file("data/admins.toml"))
    plugin.store.load("data/vip.toml")
    plugin.load()
    ...
    plugin.reload_config()     # hot reload, recomputes the smoke color
    plugin.unload()

Three independent flows hang off the host:

  timer              every ``hp_regen_interval`` s → ``regen_tick``
  EntitySpawned      → ``SmokeColorizer`` (deferred one frame)
  PlayerConnectFull  → ``ReservedSlots``
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING

from components import DecisionLog
from core.config import ConfigStore, ConfigSnapshot, VipConfig
from logic.permissions import PermissionOracle, PrivilegeCheck
from logic.regen import regen_tick
from logic.reserved_slot import ReservedSlots
from logic.smoke import SmokeColorizer

if TYPE_CHECKING:
    from core.host import Host
    from core.timers import Timer


class VipPlugin:
    MODULE_NAME = "Simple VIP Features"
    MODULE_VERSION = "1.0.0"
    MODULE_AUTHOR = "CSSharp Developer"
    MINIMUM_API_VERSION = 80

    def __init__(self, host: "Host", oracle: PermissionOracle,
                 store: ConfigStore | None = None):
        self.host = host
        self.store = store or ConfigStore()
        self.privilege = PrivilegeCheck(oracle, self.store,
                                        log=host.world.res(DecisionLog))
        self.smoke = SmokeColorizer(host, self.privilege, self.store)
        self.reserved = ReservedSlots(host, self.privilege, self.store)
        self.loaded = False
        self._regen_timer: "Timer | None" = None

    # ── Config ───────────────────────────────────────────────────────

    def on_config_parsed(self, config: VipConfig) -> ConfigSnapshot:
        """Install a config handed over by the host's config system."""
        snap = self.store.apply(config)
        self._sync_timer()
        return snap

    def reload_config(self, path: str | Path | None = None) -> ConfigSnapshot:
        """Re-read the config file (or *path*) and swap it in."""
        snap = self.store.load(path) if path is not None else self.store.reload()
        self._sync_timer()
        return snap

    # ── Lifecycle ────────────────────────────────────────────────────

    def load(self, hot_reload: bool = False) -> None:
        if self.loaded:
            return
        if not self.store.loaded:
            self.store.apply(VipConfig())

        self._arm_regen_timer()
        self.host.subscribe("EntitySpawned", self.smoke.on_entity_spawned)
        self.host.subscribe("PlayerConnectFull", self.reserved.on_player_connect_full)
        self.loaded = True
        print(f"[VIP] {self.MODULE_NAME} {self.MODULE_VERSION} loaded"
              f"{' (hot reload)' if hot_reload else ''}")

    def unload(self) -> None:
        if not self.loaded:
            return
        self.host.timers.kill_owner(self)
        self._regen_timer = None
        self.host.unsubscribe("EntitySpawned", self.smoke.on_entity_spawned)
        self.host.unsubscribe("PlayerConnectFull", self.reserved.on_player_connect_full)
        self.store.unload()
        self.loaded = False
        print(f"[VIP] {self.MODULE_NAME} unloaded")

    # ── Timer ────────────────────────────────────────────────────────

    def on_regen_timer(self) -> int:
        return regen_tick(self.host, self.privilege, self.store)

    def _arm_regen_timer(self) -> None:
        interval = self.store.config.hp_regen_interval
        self._regen_timer = self.host.add_timer(
            interval, self.on_regen_timer, repeat=True, owner=self)

    def _sync_timer(self) -> None:
        """Re-arm the regen timer if a reload changed its interval."""
        if not self.loaded or self._regen_timer is None:
            return
        if self._regen_timer.interval == self.store.config.hp_regen_interval:
            return
        self.host.timers.kill(self._regen_timer)
        self._arm_regen_timer()
