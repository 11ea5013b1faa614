"""
Create Portal User

Creates a login account from the command line, using the same validation as
the sign-up page.

Usage:
    python scripts/create_user.py user@example.com
    (the password is prompted for)
"""

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from admit_portal.core.config import settings
from admit_portal.core.database import close_db, create_engine, create_session_maker, init_db
from admit_portal.core.errors import PortalError
from admit_portal.modules.auth.service import register_user


async def create_user(email: str, password: str) -> int:
    """Create the user. Returns a process exit code."""
    engine = create_engine(settings.database_url)
    try:
        await init_db(engine, create_tables=settings.auto_create_tables)
        session_maker = create_session_maker(engine)

        async with session_maker() as db:
            try:
                user = await register_user(
                    db,
                    email=email,
                    password=password,
                    confirm_password=password,
                    bcrypt_rounds=settings.bcrypt_rounds,
                )
            except PortalError as e:
                print(f"Could not create user: {e.message}")
                return 1

        print("User created successfully!")
        print(f"  Email: {user.email}")
        print(f"  ID: {user.id}")
        return 0
    finally:
        await close_db(engine)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a portal login account.")
    parser.add_argument("email")
    args = parser.parse_args()

    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Confirm password: "):
        print("Passwords do not match")
        sys.exit(1)

    sys.exit(asyncio.run(create_user(args.email, password)))


if __name__ == "__main__":
    main()
