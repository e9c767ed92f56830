"""test_config.py — Config parsing, validation and hot reload.

Tests:
1. Smoke color parsing (good, malformed, odd whitespace)
2. VipConfig.from_dict — aliases, defaults, invalid values
3. ConfigStore — file load, missing file, reload swap, unload

Run: python test_config.py
"""
from __future__ import annotations
import sys, tempfile, traceback
from pathlib import Path

from core.config import ConfigStore, ConfigSnapshot, VipConfig, parse_color


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


def _write(tmp: Path, name: str, text: str) -> Path:
    path = tmp / name
    path.write_text(text, encoding="utf-8")
    return path


# ════════════════════════════════════════════════════════════════════════
#  TEST 1 — Smoke color parsing
# ════════════════════════════════════════════════════════════════════════

def test_parse_color():
    print("\n=== Test 1: Smoke color parsing ===")

    color = parse_color("0 255 0")
    assert color is not None
    assert tuple(color) == (0.0, 255.0, 0.0), tuple(color)
    ok('"0 255 0" → (0, 255, 0)')

    assert parse_color("green") is None
    ok('"green" → None (no exception)')

    assert tuple(parse_color("  12.5\t40   255 ")) == (12.5, 40.0, 255.0)
    ok("Tabs and repeated spaces are accepted")

    for bad in ("", "1 2", "1 2 3 4", "1 two 3", "nan 0 0", "0 inf 0"):
        assert parse_color(bad) is None, bad
    ok("Wrong arity, non-numeric and non-finite inputs → None")

    assert parse_color(None) is None
    ok("Non-string input → None")


# ════════════════════════════════════════════════════════════════════════
#  TEST 2 — VipConfig.from_dict
# ════════════════════════════════════════════════════════════════════════

def test_config_from_dict():
    print("\n=== Test 2: VipConfig.from_dict ===")

    defaults = VipConfig()
    assert defaults.vip_flag == "@css/vip"
    assert defaults.hp_regen_amount == 2
    assert defaults.hp_regen_interval == 20.0
    assert defaults.smoke_color == "0 255 0"
    assert defaults.enable_reserved_slot is True
    assert defaults.privilege_fail_open is False
    ok("Defaults match the documented values")

    cfg = VipConfig.from_dict({
        "VipFlag": "@css/gold",
        "HpRegenAmount": 5,
        "HpRegenInterval": 3,
        "SmokeColor": "255 0 0",
        "EnableReservedSlot": False,
    })
    assert cfg.vip_flag == "@css/gold"
    assert cfg.hp_regen_amount == 5
    assert cfg.hp_regen_interval == 3.0 and isinstance(cfg.hp_regen_interval, float)
    assert cfg.smoke_color == "255 0 0"
    assert cfg.enable_reserved_slot is False
    ok("PascalCase keys map onto fields")

    cfg = VipConfig.from_dict({
        "hp_regen_amount": 0,
        "hp_regen_interval": -1.0,
        "enable_reserved_slot": "yes",
        "vip_flag": "",
        "not_a_key": 1,
    })
    assert cfg == VipConfig()
    ok("Invalid values and unknown keys fall back to defaults")

    cfg = VipConfig.from_dict({"hp_regen_amount": True})
    assert cfg.hp_regen_amount == 2
    ok("Booleans are not accepted as regen amounts")


# ════════════════════════════════════════════════════════════════════════
#  TEST 3 — ConfigStore load / reload / unload
# ════════════════════════════════════════════════════════════════════════

def test_config_store():
    print("\n=== Test 3: ConfigStore ===")

    with tempfile.TemporaryDirectory() as d:
        tmp = Path(d)

        store = ConfigStore()
        assert not store.loaded
        snap = store.load(tmp / "missing.toml")
        assert snap.config == VipConfig()
        assert tuple(snap.smoke_color) == (0.0, 255.0, 0.0)
        assert store.loaded
        ok("Missing file → defaults")

        path = _write(tmp, "vip.toml", (
            "[vip]\n"
            "hp_regen_amount = 7\n"
            "smoke_color = \"255 0 255\"\n"
        ))
        first = store.load(path)
        assert first.config.hp_regen_amount == 7
        assert tuple(first.smoke_color) == (255.0, 0.0, 255.0)
        ok("[vip] table loaded from file")

        _write(tmp, "vip.toml", "SmokeColor = \"purple\"\nHpRegenAmount = 3\n")
        second = store.reload()
        assert second is store.snapshot
        assert second.config.hp_regen_amount == 3
        assert second.smoke_color is None
        assert store.smoke_color is None
        ok("Reload re-reads the same path; malformed color leaves it unset")

        assert tuple(first.smoke_color) == (255.0, 0.0, 255.0)
        assert first.config.hp_regen_amount == 7
        ok("Previous snapshot is untouched by the reload")

        store.unload()
        assert not store.loaded
        assert store.snapshot.config == VipConfig()
        assert not store.loaded
        ok("Unload discards the snapshot; reads fall back to defaults")

    store = ConfigStore(VipConfig(smoke_color="1 2 3"))
    handed = store.smoke_color
    handed.x = 99
    assert tuple(store.smoke_color) == (1.0, 2.0, 3.0)
    ok("smoke_color hands out copies")

    snap = ConfigSnapshot.build(VipConfig(smoke_color="bad"))
    assert snap.color() is None
    ok("ConfigSnapshot.build with bad color → color() is None")


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    sections = [
        ("Color parsing", test_parse_color),
        ("Config from dict", test_config_from_dict),
        ("Config store", test_config_store),
    ]
    for name, fn in sections:
        try:
            fn()
        except Exception:
            fail(name, traceback.format_exc())

    print(f"\n{'=' * 60}")
    print(f"  Config Tests: {passed} passed, {failed} failed")
    print(f"{'=' * 60}")
    sys.exit(1 if failed else 0)
