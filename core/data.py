"""
core/data.py — TOML → ECS loader

Reads data files and spawns entities with the right components.
The mapping from TOML keys to component constructors lives here.

Usage:
    loader = DataLoader(world)
    loader.register("session", Session)      # maps TOML key → component class
    loader.register("pawn", Pawn)
    ids = loader.load("data/roster.toml")    # returns {name: entity_id}
"""

from __future__ import annotations
try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib
from pathlib import Path
from dataclasses import fields
from core.ecs import World


class DataLoader:
    def __init__(self, world: World):
        self.world = world
        self._registry: dict[str, type] = {}

    def register(self, key: str, comp_type: type):
        """Map a TOML section name to a component class.

        In the TOML file:
            [alice.session]
            user_id = 3
            name = "alice"

        With register("session", Session), this creates
        Session(user_id=3, name="alice") on alice's entity.
        """
        self._registry[key] = comp_type

    def read(self, path: str | Path) -> dict[str, dict]:
        """Parse *path* into ``{name: {key: kwargs}}`` without spawning.

        Only tables whose key is registered are kept.
        """
        with open(Path(path), "rb") as f:
            data = tomllib.load(f)
        out: dict[str, dict] = {}
        for name, section in data.items():
            if not isinstance(section, dict):
                continue
            out[name] = {k: v for k, v in section.items() if k in self._registry}
        return out

    def build(self, key: str, value) -> object:
        """Construct the component registered under *key*."""
        comp_type = self._registry[key]
        if isinstance(value, dict):
            # Nested table → component with kwargs
            return _build_component(comp_type, value)
        # Bare value → component with single positional arg
        return comp_type(value)

    def load(self, path: str | Path) -> dict[str, int]:
        """Load a TOML file. Each top-level key becomes an entity.
        Returns {name: entity_id} so you can reference them."""
        ids: dict[str, int] = {}
        for name, section in self.read(path).items():
            eid = self.world.spawn()
            ids[name] = eid
            for key, value in section.items():
                self.world.add(eid, self.build(key, value))
        return ids


def _build_component(comp_type: type, kwargs: dict):
    """Build a dataclass instance, skipping unknown fields."""
    valid = {f.name for f in fields(comp_type)} if hasattr(comp_type, '__dataclass_fields__') else set()
    if valid:
        filtered = {k: v for k, v in kwargs.items() if k in valid}
        return comp_type(**filtered)
    return comp_type(**kwargs)
