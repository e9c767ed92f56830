"""core/config.py — VIP plugin configuration.

All tunables live in ``data/vip.toml`` and are loaded into an immutable
snapshot::

    store = ConfigStore()
    store.load()                      # data/vip.toml
    snap = store.snapshot             # read once per handler call
    snap.config.hp_regen_amount, snap.smoke_color

The smoke color string is parsed exactly once per (re)load.  A reload
builds a whole new ``ConfigSnapshot`` and swaps it in with a single
assignment, so a handler never sees the new config paired with the
old color.

Keys may be written snake_case (``hp_regen_amount``) or in the host's
PascalCase (``HpRegenAmount``).
"""

from __future__ import annotations
import math
from dataclasses import dataclass, fields, replace
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib                # pip install tomli

from pygame.math import Vector3


DEFAULT_PATH = Path(__file__).resolve().parent.parent / "data" / "vip.toml"

_ALIASES = {
    "VipFlag": "vip_flag",
    "HpRegenAmount": "hp_regen_amount",
    "HpRegenInterval": "hp_regen_interval",
    "SmokeColor": "smoke_color",
    "EnableReservedSlot": "enable_reserved_slot",
    "PrivilegeFailOpen": "privilege_fail_open",
}


@dataclass(frozen=True)
class VipConfig:
    vip_flag: str = "@css/vip"
    hp_regen_amount: int = 2
    hp_regen_interval: float = 20.0     # seconds
    smoke_color: str = "0 255 0"        # R G B
    enable_reserved_slot: bool = True
    # Answer given when the permission oracle cannot be reached
    privilege_fail_open: bool = False

    @classmethod
    def from_dict(cls, raw: dict) -> "VipConfig":
        """Build a config from a TOML table, replacing bad values with defaults."""
        defaults = cls()
        valid = {f.name for f in fields(cls)}
        values: dict = {}
        for key, value in raw.items():
            name = _ALIASES.get(key, key)
            if name not in valid:
                print(f"[CONFIG] Unknown key {key!r} ignored")
                continue
            checked = _validate(name, value)
            if checked is None:
                print(f"[CONFIG] Invalid {key} = {value!r}; "
                      f"using default {getattr(defaults, name)!r}")
                continue
            values[name] = checked
        return replace(defaults, **values)


def _validate(name: str, value):
    """Return the coerced value, or None if it is unusable."""
    if name in ("vip_flag", "smoke_color"):
        return value if isinstance(value, str) and value else None
    if name in ("enable_reserved_slot", "privilege_fail_open"):
        return value if isinstance(value, bool) else None
    if name == "hp_regen_amount":
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value if value > 0 else None
    if name == "hp_regen_interval":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        value = float(value)
        return value if math.isfinite(value) and value > 0 else None
    return value


def parse_color(text: str) -> Vector3 | None:
    """Parse ``"R G B"`` into a vector, or return None if malformed.

    >>> tuple(parse_color("0 255 0"))
    (0.0, 255.0, 0.0)
    """
    parts = text.split() if isinstance(text, str) else []
    try:
        if len(parts) == 3:
            r, g, b = (float(p) for p in parts)
            if all(math.isfinite(c) for c in (r, g, b)):
                return Vector3(r, g, b)
    except ValueError:
        pass
    print(f"[VIP] Error parsing smoke color: {text!r}. Smoke color disabled.")
    return None


@dataclass(frozen=True)
class ConfigSnapshot:
    """One loaded config plus the values derived from it."""
    config: VipConfig
    smoke_color: Vector3 | None

    @classmethod
    def build(cls, config: VipConfig) -> "ConfigSnapshot":
        return cls(config=config, smoke_color=parse_color(config.smoke_color))

    def color(self) -> Vector3 | None:
        """A private copy of the parsed color, safe to hand to an entity."""
        return Vector3(self.smoke_color) if self.smoke_color is not None else None


class ConfigStore:
    """Holds the current ``ConfigSnapshot``.  Stored as a world resource."""

    def __init__(self, config: VipConfig | None = None):
        self._path: Path | None = None
        self._snapshot: ConfigSnapshot | None = None
        if config is not None:
            self.apply(config)

    # ── Loading ──────────────────────────────────────────────────────

    def load(self, path: str | Path | None = None) -> ConfigSnapshot:
        """Load (or reload) config from *path* (default ``data/vip.toml``).

        A missing file gives the defaults.
        """
        path = Path(path) if path is not None else DEFAULT_PATH
        self._path = path

        if not path.exists():
            print(f"[CONFIG] {path} not found — using defaults")
            return self.apply(VipConfig())

        with open(path, "rb") as f:
            raw = tomllib.load(f)

        table = raw.get("vip", raw)
        snap = self.apply(VipConfig.from_dict(table))
        print(f"[CONFIG] Loaded {path}")
        return snap

    def reload(self) -> ConfigSnapshot:
        """Re-read the last loaded file."""
        return self.load(self._path)

    def apply(self, config: VipConfig) -> ConfigSnapshot:
        """Install *config* and its derived values in one swap."""
        snap = ConfigSnapshot.build(config)
        self._snapshot = snap
        return snap

    def unload(self) -> None:
        self._snapshot = None

    # ── Access ───────────────────────────────────────────────────────

    @property
    def loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> ConfigSnapshot:
        """Current snapshot.  Defaults (not stored) if nothing is loaded."""
        if self._snapshot is None:
            return ConfigSnapshot.build(VipConfig())
        return self._snapshot

    @property
    def config(self) -> VipConfig:
        return self.snapshot.config

    @property
    def smoke_color(self) -> Vector3 | None:
        return self.snapshot.color()

    @property
    def path(self) -> Path | None:
        return self._path
