"""components.decision_log — Structured record of policy decisions.

A ring-buffer resource that records timestamped actions taken by the
VIP systems: evictions, config problems, oracle outages.  Console
output is for the operator; this is for code (tests, admin tools) that
needs to ask "what did the plugin do and why".

Usage:
    log = world.res(DecisionLog)
    log.record(eid, "admission", "kicked bob for VIP alice",
               details={"target_user_id": 7})

Each entry is a dict:
    {"t": float, "eid": int, "name": str, "cat": str,
     "msg": str, "details": dict | None}
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class DecisionLog:
    """Ring-buffer of policy decisions."""

    entries: list[dict] = field(default_factory=list)
    max_entries: int = 500

    def record(self, eid: int, cat: str, msg: str, *,
               name: str = "", t: float = 0.0,
               details: dict | None = None) -> None:
        self.entries.append({
            "t": t,
            "eid": eid,
            "name": name,
            "cat": cat,
            "msg": msg,
            "details": details,
        })
        if len(self.entries) > self.max_entries:
            self.entries = self.entries[-self.max_entries:]

    def clear(self):
        self.entries.clear()

    def recent(self, n: int = 50) -> list[dict]:
        """Return the *n* most recent entries (newest last)."""
        return self.entries[-n:]

    def for_eid(self, eid: int, n: int = 30) -> list[dict]:
        return [e for e in self.entries if e["eid"] == eid][-n:]

    def for_cat(self, cat: str, n: int = 50) -> list[dict]:
        return [e for e in self.entries if e["cat"] == cat][-n:]
