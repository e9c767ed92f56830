"""logic/permissions.py — Privilege checks against an external authority.

The VIP systems only ever ask one question: *does this session hold the
configured flag right now?*  Whoever answers it implements
``PermissionOracle``; the bundled ``AdminRegistry`` is the in-memory
answer used by the headless server and the tests.

    registry = AdminRegistry.from_file("data/admins.toml")
    check = PrivilegeCheck(registry, config_store)
    if check.is_privileged(session): ...

An oracle that cannot answer should raise ``OracleUnavailable``; any
other error it raises is handled the same way.

Nothing here caches an answer.  Flags can be granted or revoked while a
player is connected and the next check must see it.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib

if TYPE_CHECKING:
    from components import Session
    from components.decision_log import DecisionLog
    from core.config import ConfigStore


ROOT_FLAG = "@css/root"


class OracleUnavailable(RuntimeError):
    """The permission authority could not answer."""


class PermissionOracle(Protocol):
    def has(self, session: "Session", flag: str) -> bool:
        ...


class AdminRegistry:
    """Flag sets keyed by user id.  ``@css/root`` satisfies any flag."""

    def __init__(self, admins: dict[int, set[str]] | None = None):
        self._flags: dict[int, set[str]] = {
            uid: set(flags) for uid, flags in (admins or {}).items()
        }

    @classmethod
    def from_file(cls, path: str | Path) -> "AdminRegistry":
        """Load ``[[admin]]`` entries (``user_id``, ``flags``) from TOML."""
        path = Path(path)
        registry = cls()
        if not path.exists():
            print(f"[VIP] {path} not found — no admins loaded")
            return registry
        with open(path, "rb") as f:
            data = tomllib.load(f)
        for entry in data.get("admin", []):
            registry.grant(int(entry["user_id"]), *entry.get("flags", []))
        print(f"[VIP] Loaded {len(registry._flags)} admins from {path}")
        return registry

    def grant(self, user_id: int, *flags: str) -> None:
        self._flags.setdefault(user_id, set()).update(flags)

    def revoke(self, user_id: int, *flags: str) -> None:
        """Remove *flags*, or every flag when none are given."""
        if not flags:
            self._flags.pop(user_id, None)
            return
        held = self._flags.get(user_id)
        if held is not None:
            held.difference_update(flags)

    def flags_for(self, user_id: int) -> frozenset[str]:
        return frozenset(self._flags.get(user_id, ()))

    def has(self, session: "Session", flag: str) -> bool:
        held = self._flags.get(session.user_id)
        if not held:
            return False
        return flag in held or ROOT_FLAG in held


class PrivilegeCheck:
    """Answers "is this session a VIP" using the current config's flag."""

    def __init__(self, oracle: PermissionOracle, store: "ConfigStore",
                 log: "DecisionLog | None" = None):
        self.oracle = oracle
        self.store = store
        self.log = log

    def is_privileged(self, session: "Session | None") -> bool:
        if session is None:
            return False
        config = self.store.config
        try:
            return bool(self.oracle.has(session, config.vip_flag))
        except Exception as exc:
            # Any oracle failure counts as an outage
            fallback = config.privilege_fail_open
            print(f"[VIP] Permission check for {session.name} failed ({exc}); "
                  f"treating as {'VIP' if fallback else 'non-VIP'}")
            if self.log is not None:
                self.log.record(-1, "oracle", "permission oracle unavailable",
                                name=session.name,
                                details={"user_id": session.user_id,
                                         "fail_open": fallback})
            return fallback

    __call__ = is_privileged
