"""
One-time script to create your first admin user.
Run from the project root:

    python scripts/create_admin.py

You will be prompted for name, email and password.
"""

import getpass
import os
import sys

# Make sure the project root is on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from boardctrl.core.exceptions import BoardCtrlError
from boardctrl.database import SessionLocal, init_db
from boardctrl.models.users import Role
from boardctrl.services.rbac import ADMIN
from boardctrl.services.repository import UserRepository


def main():
    # Ensure the tables and default roles exist
    init_db()

    db = SessionLocal()
    try:
        print("\n── BoardCtrl · Create Admin User ──\n")

        name = input("User name: ").strip()
        if not name:
            print("User name cannot be empty.")
            return

        repo = UserRepository(db)
        existing = repo.get_by_name(name)
        if existing:
            print(f"User {name} already exists (role id: {existing.role_id}).")
            return

        email = input("Email: ").strip()
        password = getpass.getpass("Password: ")

        admin_role = db.scalar(select(Role).where(Role.name == ADMIN))
        try:
            user = repo.create(
                {
                    "name": name,
                    "email": email,
                    "password": password,
                    "role_id": admin_role.id,
                    "status": True,
                },
                actor="create_admin",
            )
        except BoardCtrlError as exc:
            print(f"Could not create user: {exc.message}")
            return

        print(f"\n✓ User created: {user.name} (role: {ADMIN}, id: {user.id})\n")

    finally:
        db.close()


if __name__ == "__main__":
    main()
