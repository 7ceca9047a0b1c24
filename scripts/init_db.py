#!/usr/bin/env python3
"""
Initialize the BoardCtrl database.
Creates all tables and seeds the default Admin and User roles.
"""

import sys
from pathlib import Path

# Allow running from project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from boardctrl.config import get_settings
from boardctrl.database import DEFAULT_ROLES, init_db


def main():
    settings = get_settings()
    print("Initializing database...")
    print(f"  DATABASE_URL: {settings.DATABASE_URL[:40]}...")
    print(f"  Environment: {settings.ENVIRONMENT}")

    init_db()

    print("Database initialized successfully.")
    print(f"Roles available: {', '.join(DEFAULT_ROLES)}")


if __name__ == "__main__":
    main()
