"""CLI tool for admin operations.

Usage:
    python -m tokengate.cli register-developer
    python -m tokengate.cli list-developers
    python -m tokengate.cli purge-revocations
"""

import json
import sys
from pathlib import Path

from pydantic import TypeAdapter, ValidationError
from sqlmodel import Session, select

from tokengate.database import engine, create_db_and_tables
from tokengate.models.developer import Developer
from tokengate.schemas.access_level import AccessLevel
from tokengate.services.developers import register_developer
from tokengate.services.revocation import DatabaseRevocationList
from tokengate.utils.logging import setup_logging

_levels_adapter = TypeAdapter(list[AccessLevel])


def load_access_levels(path: str) -> list[AccessLevel]:
    """Read an ordered (lowest to highest) list of access levels from a JSON file."""
    return _levels_adapter.validate_python(json.loads(Path(path).read_text()))


def register():
    """Register an application and print its API credentials once."""
    create_db_and_tables()

    email = input("Email: ").strip()
    app_name = input("App name: ").strip()
    if not app_name:
        print("App name cannot be empty.")
        sys.exit(1)

    levels_path = input("Access levels JSON file: ").strip()
    try:
        access_levels = load_access_levels(levels_path)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(f"Could not load access levels: {e}")
        sys.exit(1)

    with Session(engine) as session:
        developer, api_secret = register_developer(session, email, app_name, access_levels)

    print(f"\nApp '{app_name}' registered with {len(access_levels)} access levels.")
    print(f"\nAPI key:    {developer.api_key}")
    print(f"API secret: {api_secret}")
    print("\nStore the secret now; it cannot be shown again.")


def list_developers():
    create_db_and_tables()
    with Session(engine) as session:
        developers = session.exec(select(Developer).order_by(Developer.id)).all()

    if not developers:
        print("No developers registered.")
        return
    for dev in developers:
        levels = ", ".join(level.get("levelName", "?") for level in dev.access_levels or [])
        state = "active" if dev.is_active else "inactive"
        print(f"{dev.id:>4}  {dev.app_name:<24} {dev.api_key}  {state:<8} [{levels}]")


def purge_revocations():
    """Delete denylist entries whose tokens have expired."""
    create_db_and_tables()
    removed = DatabaseRevocationList(engine).purge_expired()
    print(f"Removed {removed} expired revocation entries.")


COMMANDS = {
    "register-developer": register,
    "list-developers": list_developers,
    "purge-revocations": purge_revocations,
}


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m tokengate.cli <command>")
        print(f"Commands: {', '.join(COMMANDS)}")
        sys.exit(1)

    command = COMMANDS.get(sys.argv[1])
    if command is None:
        print(f"Unknown command: {sys.argv[1]}")
        sys.exit(1)
    setup_logging()
    command()


if __name__ == "__main__":
    main()
