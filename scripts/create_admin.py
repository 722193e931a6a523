#!/usr/bin/env python3
"""
CLI script to create a user, by default an administrator.

Usage (interactive):
    python scripts/create_admin.py

Usage (non-interactive, for deployments):
    python scripts/create_admin.py --email admin@example.com --password yourpassword --name "Site Admin"
"""

import argparse
import asyncio
import sys
from getpass import getpass
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pausegate.database import engine, get_db_context
from pausegate.exceptions import ValidationException
from pausegate.models.user import Role
from pausegate.services.auth_service import MIN_PASSWORD_LENGTH, get_auth_service


async def create_admin(
    email: str | None = None,
    password: str | None = None,
    name: str = "",
    role: str = Role.ADMINISTRATOR.value,
) -> bool:
    """Create a user account with the given role."""
    print("\n" + "=" * 50)
    print("PauseGate - User Setup")
    print("=" * 50 + "\n")

    if not email:
        email = input("Enter email address: ").strip().lower()

    if not password:
        while True:
            password = getpass(f"Enter password (min {MIN_PASSWORD_LENGTH} characters): ")
            if len(password) >= MIN_PASSWORD_LENGTH:
                break
            print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")

        password_confirm = getpass("Confirm password: ")
        if password != password_confirm:
            print("\nPasswords do not match. Aborting.")
            return False

    try:
        async with get_db_context() as db:
            user = await get_auth_service().create_user(
                db, email=email, password=password, role=role, display_name=name
            )
    except ValidationException as e:
        for error in e.errors:
            print(f"{error['field']}: {error['message']}")
        return False

    print("\n" + "=" * 50)
    print("User Created Successfully!")
    print("=" * 50)
    print(f"  Email: {user.email}")
    print(f"  Name: {user.display_name}")
    print(f"  Role: {user.role}")
    print(f"  ID: {user.id}")
    print("=" * 50 + "\n")
    return True


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create a PauseGate user")
    parser.add_argument("--email", "-e", help="Email address")
    parser.add_argument("--password", "-p", help=f"Password (min {MIN_PASSWORD_LENGTH} chars)")
    parser.add_argument("--name", "-n", help="Display name", default="")
    parser.add_argument(
        "--role",
        "-r",
        choices=[role.value for role in Role],
        default=Role.ADMINISTRATOR.value,
        help="Role (default: administrator)",
    )

    args = parser.parse_args()

    try:
        success = await create_admin(
            email=args.email,
            password=args.password,
            name=args.name,
            role=args.role,
        )
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\nAborted by user.")
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
