#!/usr/bin/env python
import sys
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory

ROOT = Path(__file__).resolve().parent.parent


def main():
    ini = ROOT / "alembic.ini"
    if not ini.exists():
        print("Error: alembic.ini not found at", ini)
        sys.exit(1)

    cfg = Config(str(ini))
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    heads = ScriptDirectory.from_config(cfg).get_heads()
    if len(heads) != 1:
        print(f"Error: expected 1 Alembic head, found {len(heads)}: {heads}")
        sys.exit(1)
    print(f"Alembic head OK: {heads[0]}")


if __name__ == "__main__":
    main()
