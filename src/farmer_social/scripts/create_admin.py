"""Create the first admin account in the configured database."""
from __future__ import annotations

import argparse
import getpass
import sys

from pydantic import ValidationError as SchemaValidationError

from farmer_social.core.errors import ValidationError
from farmer_social.core.settings import settings
from farmer_social.db.session import Database
from farmer_social.services import UserService


def create_admin(database: Database, username: str, email: str, password: str) -> int:
    """Create the admin user and return its id."""
    database.create_tables()
    session = database.session_factory()
    try:
        user = UserService(session).create_admin(username, email, password)
        return user.id
    finally:
        session.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create an admin account")
    parser.add_argument("--username", required=True, help="Public handle of the admin")
    parser.add_argument("--email", required=True, help="Login email of the admin")
    parser.add_argument(
        "--password",
        default=None,
        help="Password; prompted for when omitted",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Admin password: ")
    database = Database(args.url or settings.effective_database_url)
    try:
        user_id = create_admin(database, args.username, args.email, password)
    except (ValidationError, SchemaValidationError) as exc:
        print(f"[create_admin] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        database.dispose()
    print(f"[create_admin] created admin {args.username} (id={user_id})")


if __name__ == "__main__":
    main()
