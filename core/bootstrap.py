"""core/bootstrap.py — Server bootstrap helpers.

Extracted from main.py to keep the entry point clean and readable.
Handles:
  - Component registration with the DataLoader
  - Roster restoration from roster.toml (connect → complete → pawn)
  - VIP plugin creation and loading
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from components import Session, Pawn
from core.data import DataLoader
from logic.permissions import AdminRegistry
from logic.vip import VipPlugin

if TYPE_CHECKING:
    from core.host import Host


DATA_DIR = Path(__file__).resolve().parent.parent / "data"


# ── Component registration ───────────────────────────────────────────

def register_components(loader: DataLoader) -> None:
    """Register all component types the DataLoader can deserialise."""
    loader.register("session", Session)
    loader.register("pawn", Pawn)


# ── Roster ───────────────────────────────────────────────────────────

def load_roster(host: "Host", path: str | Path) -> dict[str, int]:
    """Connect every player described in *path*.

    Goes through the host API rather than ``DataLoader.load`` so each
    arrival raises ``PlayerConnectFull`` like a real connection would.
    Returns ``{name: controller_eid}``.
    """
    loader = DataLoader(host.world)
    register_components(loader)

    ids: dict[str, int] = {}
    for name, section in loader.read(path).items():
        session = loader.build("session", {"name": name, **section.get("session", {})})
        eid = host.connect(
            session.name,
            bot=session.is_bot,
            user_id=session.user_id if session.user_id >= 0 else None,
        )
        host.complete_connection(eid)
        if "pawn" in section:
            pawn = loader.build("pawn", section["pawn"])
            host.spawn_pawn(eid, health=pawn.health)
        ids[name] = eid

    print(f"[MAIN] Connected {len(ids)} players from {path}")
    return ids


# ── Plugin ───────────────────────────────────────────────────────────

def load_vip_plugin(host: "Host", data_dir: str | Path = DATA_DIR) -> VipPlugin:
    """Create the VIP plugin from ``vip.toml`` + ``admins.toml`` and load it."""
    data_dir = Path(data_dir)
    plugin = VipPlugin(host, AdminRegistry.from_file(data_dir / "admins.toml"))
    plugin.store.load(data_dir / "vip.toml")
    plugin.load()
    return plugin
