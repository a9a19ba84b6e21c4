from __future__ import annotations

from homed_devlist.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
