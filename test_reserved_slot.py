"""test_reserved_slot.py — Kicking a non-VIP to seat an arriving VIP.

Scenario layout: the roster is filled *before* the plugin loads, one
connection per second so connection times are distinct, then the VIP
arrives with the plugin active.

Tests:
1. Full server with humans, VIPs and bots — newest human non-VIP goes
1b. Two VIPs in one frame — each evicts a different player
2. Fallbacks — bots only, VIPs only, VIP-flagged bots
3. No-ops — feature disabled, non-VIP arrival, room left
4. Target selection edge cases — arrival never chosen, connecting ignored

Run: python test_reserved_slot.py
"""
from __future__ import annotations
import sys, traceback

from core.config import ConfigStore, VipConfig
from core.host import Host
from components import DecisionLog, Session
from logic.permissions import AdminRegistry, PrivilegeCheck
from logic.reserved_slot import KICK_REASON, select_eviction_target
from logic.roster import connected_players
from logic.vip import VipPlugin


# ── Test harness ─────────────────────────────────────────────────────

passed = 0
failed = 0

def ok(label: str):
    global passed
    passed += 1
    print(f"  [PASS] {label}")

def fail(label: str, detail: str = ""):
    global failed
    failed += 1
    print(f"  [FAIL] {label}")
    if detail:
        for line in detail.strip().splitlines():
            print(f"         {line}")


VIP = "@css/vip"


def _fill(host: Host, admins: AdminRegistry,
          roster: list[tuple[str, str]]) -> dict[str, int]:
    """Connect *roster* entries of (name, kind) where kind is
    "vip", "human", "bot" or "vip_bot".  One second apart."""
    ids: dict[str, int] = {}
    for name, kind in roster:
        eid = host.connect(name, bot=kind in ("bot", "vip_bot"))
        if kind in ("vip", "vip_bot"):
            admins.grant(host.world.get(eid, Session).user_id, VIP)
        host.complete_connection(eid)
        host.run_frame(1.0)
        ids[name] = eid
    return ids


def _arrive(host: Host, admins: AdminRegistry, name: str, *, vip: bool = True) -> int:
    eid = host.connect(name)
    if vip:
        admins.grant(host.world.get(eid, Session).user_id, VIP)
    host.complete_connection(eid)
    host.run_frame(1.0)
    return eid


def _setup(roster, *, max_players: int = 10, **config) -> tuple[Host, AdminRegistry, VipPlugin, dict]:
    host = Host(max_players=max_players)
    admins = AdminRegistry()
    ids = _fill(host, admins, roster)
    plugin = VipPlugin(host, admins, ConfigStore(VipConfig(**config)))
    plugin.load()
    return host, admins, plugin, ids


MIXED = [
    ("h1", "human"), ("v1", "vip"), ("h2", "human"), ("b1", "bot"),
    ("h3", "human"), ("v2", "vip"), ("h4", "human"), ("h5", "human"),
    ("b2", "bot"), ("v3", "vip"),
]


# ════════════════════════════════════════════════════════════════════════
#  TEST 1 — Full mixed server
# ════════════════════════════════════════════════════════════════════════

def test_full_mixed_server():
    print("\n=== Test 1: Full mixed server ===")

    host, admins, plugin, ids = _setup(MIXED)
    reasons: list[tuple[int, str]] = []
    host.subscribe("PlayerDisconnected", lambda ev: reasons.append((ev.eid, ev.reason)))

    vip = _arrive(host, admins, "vip_new")

    assert not host.world.alive(ids["h5"])
    assert reasons == [(ids["h5"], KICK_REASON)], reasons
    ok("Newest human non-VIP (h5) is kicked with the VIP reason")

    for name in ("h1", "h2", "h3", "h4", "v1", "v2", "v3", "b1", "b2"):
        assert host.world.alive(ids[name]), name
    assert host.world.alive(vip)
    ok("Bots, VIPs, older humans and the arrival all stay")

    assert host.console == ["[VIP] Kicking h5 to make room for VIP vip_new."]
    entries = host.world.res(DecisionLog).for_cat("admission")
    assert len(entries) == 1
    assert entries[0]["eid"] == ids["h5"]
    assert entries[0]["details"]["vip_user_id"] == host.world.get(vip, Session).user_id
    ok("Console line and decision log record who was kicked for whom")

    second = _arrive(host, admins, "vip_two")
    assert not host.world.alive(ids["h4"])
    assert host.world.alive(second)
    ok("Next VIP arrival takes the next-newest human (h4)")


def test_vips_arriving_together():
    print("\n=== Test 1b: Two VIPs in one frame ===")

    roster = [(f"h{i}", "human") for i in range(4)]
    host, admins, plugin, ids = _setup(roster, max_players=4)

    arrivals = []
    for name in ("vipA", "vipB"):
        eid = host.connect(name)
        admins.grant(host.world.get(eid, Session).user_id, VIP)
        arrivals.append(eid)
    for eid in arrivals:
        host.complete_connection(eid)
    host.run_frame(1.0)

    assert host.console == [
        "[VIP] Kicking h3 to make room for VIP vipA.",
        "[VIP] Kicking h2 to make room for VIP vipB.",
    ], host.console
    ok("Each VIP evicts a different player")

    assert not host.world.alive(ids["h3"]) and not host.world.alive(ids["h2"])
    assert host.world.alive(ids["h0"]) and host.world.alive(ids["h1"])
    assert len(connected_players(host.world)) == 4
    ok("Both kicks land in the same frame; the server is back at capacity")

    entries = host.world.res(DecisionLog).for_cat("admission")
    assert [e["eid"] for e in entries] == [ids["h3"], ids["h2"]]
    ok("Decision log records one distinct eviction per VIP")


# ════════════════════════════════════════════════════════════════════════
#  TEST 2 — Fallbacks
# ════════════════════════════════════════════════════════════════════════

def test_fallbacks():
    print("\n=== Test 2: Fallbacks ===")

    roster = [(f"v{i}", "vip") for i in range(8)] + [("b1", "bot"), ("b2", "bot")]
    host, admins, plugin, ids = _setup(roster)
    _arrive(host, admins, "vip_new")
    assert not host.world.alive(ids["b1"])
    assert host.world.alive(ids["b2"])
    ok("No human non-VIP → the first bot is kicked")

    roster = [(f"v{i}", "vip") for i in range(10)]
    host, admins, plugin, ids = _setup(roster)
    _arrive(host, admins, "vip_new")
    assert all(host.world.alive(e) for e in ids.values())
    assert host.console == []
    ok("Server full of VIPs → nobody is kicked")

    roster = [(f"v{i}", "vip") for i in range(9)] + [("vb", "vip_bot")]
    host, admins, plugin, ids = _setup(roster)
    _arrive(host, admins, "vip_new")
    assert host.world.alive(ids["vb"])
    ok("A bot holding the VIP flag is never kicked")


# ════════════════════════════════════════════════════════════════════════
#  TEST 3 — No-ops
# ════════════════════════════════════════════════════════════════════════

def test_noops():
    print("\n=== Test 3: No-ops ===")

    host, admins, plugin, ids = _setup(MIXED, enable_reserved_slot=False)
    _arrive(host, admins, "vip_new")
    assert all(host.world.alive(e) for e in ids.values())
    ok("Reserved slot disabled → no kick even when full")

    host, admins, plugin, ids = _setup(MIXED)
    _arrive(host, admins, "pleb", vip=False)
    assert all(host.world.alive(e) for e in ids.values())
    ok("Non-VIP arrival never causes a kick")

    roster = [(f"h{i}", "human") for i in range(8)]
    host, admins, plugin, ids = _setup(roster)
    _arrive(host, admins, "vip_new")
    assert all(host.world.alive(e) for e in ids.values())
    ok("9 of 10 connected → there is room, nobody kicked")

    roster = [(f"h{i}", "human") for i in range(9)]
    host, admins, plugin, ids = _setup(roster)
    _arrive(host, admins, "vip_new")
    assert not host.world.alive(ids["h8"])
    ok("Arrival fills the last slot (10 of 10) → newest human kicked")


# ════════════════════════════════════════════════════════════════════════
#  TEST 4 — Target selection edge cases
# ════════════════════════════════════════════════════════════════════════

def test_select_target():
    print("\n=== Test 4: Target selection ===")

    host = Host(max_players=4)
    admins = AdminRegistry()
    check = PrivilegeCheck(admins, ConfigStore())
    ids = _fill(host, admins, [("old", "human"), ("vip", "vip"), ("mid", "human")])
    newest = _arrive(host, admins, "newest", vip=False)

    target = select_eviction_target(host.world, newest, check)
    assert target is not None and target[0] == ids["mid"], target
    ok("The arrival is excluded even when it is the newest non-VIP")

    joining = host.connect("joining")
    target = select_eviction_target(host.world, newest, check)
    assert target[0] == ids["mid"]
    assert host.world.get(joining, Session).state.value == "connecting"
    ok("Sessions still connecting are never candidates")

    mid_uid = host.world.get(ids["mid"], Session).user_id
    target = select_eviction_target(host.world, newest, check, leaving={mid_uid})
    assert target[0] == ids["old"], target
    ok("Players already queued for a kick are not picked again")

    host.world.get(ids["old"], Session).connected_time = 999.0
    target = select_eviction_target(host.world, newest, check)
    assert target[0] == ids["old"]
    ok("Choice follows connection time, not roster order")

    only_vips = Host()
    admins = AdminRegistry()
    ids = _fill(only_vips, admins, [("a", "vip"), ("b", "vip_bot")])
    assert select_eviction_target(only_vips.world, ids["a"],
                                  PrivilegeCheck(admins, ConfigStore())) is None
    ok("No eligible target → None")


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    sections = [
        ("Full mixed server", test_full_mixed_server),
        ("Two VIPs in one frame", test_vips_arriving_together),
        ("Fallbacks", test_fallbacks),
        ("No-ops", test_noops),
        ("Target selection", test_select_target),
    ]
    for name, fn in sections:
        try:
            fn()
        except Exception:
            fail(name, traceback.format_exc())

    print(f"\n{'=' * 60}")
    print(f"  Reserved Slot Tests: {passed} passed, {failed} failed")
    print(f"{'=' * 60}")
    sys.exit(1 if failed else 0)
