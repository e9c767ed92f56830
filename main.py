"""
main.py — Headless server bootstrap

1. Create the host
2. Load the VIP plugin (config + admin list)
3. Connect the demo roster
4. Run
"""

import pygame

from core.host import Host
from core.bootstrap import DATA_DIR, load_roster, load_vip_plugin


def main():
    pygame.init()
    host = Host(name="vip-demo", max_players=10, tick_rate=64)

    # Plugin first so it sees every connection
    load_vip_plugin(host)

    load_roster(host, DATA_DIR / "roster.toml")

    try:
        host.run()
    except KeyboardInterrupt:
        print("[MAIN] Shutting down")
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
