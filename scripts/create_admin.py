"""Create (or keep) the first admin account.

Usage: python scripts/create_admin.py admin@example.com 'password' ["Display Name"]
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.robochamps_erp.robochamps_erp.database.bootstrap import ensure_admin_user


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(__doc__.strip())
        return 2
    email, password = argv[0], argv[1]
    name = argv[2] if len(argv) > 2 else "Admin"

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    ensure_admin_user(db_config, email=email, password=password, name=name)
    print(f"OK: admin account ready -> {email} on {db_config.get('database')}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
