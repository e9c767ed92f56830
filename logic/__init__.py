"""logic — VIP policy systems.

Top-level modules
-----------------
permissions    — permission oracle protocol, AdminRegistry, PrivilegeCheck
roster         — read-only roster views (connected players, pawns, owners)
regen          — periodic VIP health regeneration
smoke          — VIP smoke color, resolved one frame after spawn
reserved_slot  — kick a non-VIP to seat an arriving VIP on a full server
vip            — VipPlugin: wires the three flows to the host
"""
