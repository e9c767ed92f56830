"""
core/ecs.py — Entity-Component-System

Entities are ints. Components are any object, stored by type.
Query by component types to get matching entities.

    w = World()
    e = w.spawn()
    w.add(e, Session(user_id=3, name="alice"))
    w.add(e, Pawn(controller_eid=e, health=80))

    for eid, session in w.query(Session):
        ...

Ids are never reused.  Code that must survive a frame boundary keeps
the id, never the component, and looks it up again with ``alive()`` /
``get()`` before touching it.
"""

from __future__ import annotations
from typing import Any, Iterator


class World:
    def __init__(self):
        self._next_id = 0
        self._stores: dict[type, dict[int, Any]] = {}
        self._live: set[int] = set()
        self._dead: set[int] = set()

    # -- Entities --

    def spawn(self) -> int:
        self._next_id += 1
        self._live.add(self._next_id)
        return self._next_id

    def kill(self, eid: int):
        self._dead.add(eid)

    def alive(self, eid: int) -> bool:
        return eid in self._live and eid not in self._dead

    def purge(self):
        """Remove dead entities from all stores. Call once per frame.

        Purged ids leave the live set, so stale handles stay dead after
        the dead set is cleared.
        """
        for store in self._stores.values():
            for eid in self._dead:
                store.pop(eid, None)
        self._live -= self._dead
        self._dead.clear()

    # -- Components --

    def add(self, eid: int, comp: Any):
        t = type(comp)
        if t not in self._stores:
            self._stores[t] = {}
        self._stores[t][eid] = comp

    def get(self, eid: int, comp_type: type) -> Any | None:
        if eid in self._dead:
            return None
        return self._stores.get(comp_type, {}).get(eid)

    def has(self, eid: int, comp_type: type) -> bool:
        return eid not in self._dead and eid in self._stores.get(comp_type, {})

    def remove(self, eid: int, comp_type: type):
        store = self._stores.get(comp_type)
        if store and eid in store:
            del store[eid]

    # -- Queries --

    def query(self, *types: type) -> Iterator[tuple]:
        """Yield (eid, comp1, comp2, ...) for entities that have ALL types.

        Entities come out in spawn order, which is the order the host
        enumerates its roster in.
        """
        if not types:
            return
        buckets = [self._stores.get(t, {}) for t in types]
        first = buckets[0]
        for eid in sorted(first):
            if not self.alive(eid):
                continue
            if all(eid in b for b in buckets[1:]):
                yield (eid, *(b[eid] for b in buckets))

    def query_one(self, *types: type) -> tuple | None:
        """Return first match or None."""
        for result in self.query(*types):
            return result
        return None

    def all_of(self, comp_type: type) -> Iterator[tuple[int, Any]]:
        """Yield (eid, component) for every entity with this type."""
        for eid, comp in self._stores.get(comp_type, {}).items():
            if self.alive(eid):
                yield eid, comp

    def count(self, comp_type: type) -> int:
        return sum(1 for _ in self.all_of(comp_type))

    # -- Resources (singletons, not tied to entities) --

    def set_res(self, resource: Any):
        t = type(resource)
        if t not in self._stores:
            self._stores[t] = {}
        self._stores[t][-1] = resource

    def res(self, res_type: type) -> Any | None:
        return self._stores.get(res_type, {}).get(-1)

    # -- Debug --

    def debug_dump(self) -> dict[int, list[Any]]:
        """Return {eid: [components...]} for every living entity."""
        entities: dict[int, list[Any]] = {}
        for comp_type, store in self._stores.items():
            for eid, comp in store.items():
                if self.alive(eid):
                    entities.setdefault(eid, []).append(comp)
        return entities
