"""Script to run database migrations."""

import sys

from alembic import command
from alembic.config import Config


def run_migrations(revision: str = "head") -> None:
    """Upgrade the database to ``revision``."""
    alembic_cfg = Config("alembic.ini")

    try:
        print(f"Running database migrations to {revision}...")
        command.upgrade(alembic_cfg, revision)
        print("✓ Migrations completed successfully!")
    except Exception as e:
        print(f"✗ Migration failed: {e}", file=sys.stderr)
        sys.exit(1)


def rollback_migration(revision: str = "-1") -> None:
    """Downgrade the database to ``revision``."""
    alembic_cfg = Config("alembic.ini")

    try:
        print(f"Rolling back database to {revision}...")
        command.downgrade(alembic_cfg, revision)
        print("✓ Rollback completed successfully!")
    except Exception as e:
        print(f"✗ Rollback failed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "downgrade":
        rollback_migration(sys.argv[2] if len(sys.argv) > 2 else "-1")
    elif len(sys.argv) > 1 and sys.argv[1] == "upgrade":
        run_migrations(sys.argv[2] if len(sys.argv) > 2 else "head")
    elif len(sys.argv) > 1:
        print("Usage: python scripts/migrate.py [upgrade [rev] | downgrade [rev]]")
    else:
        run_migrations()
