import argparse
import getpass
import logging
import sys

from portfolio.adapters.auth.crypto import JWTAuthAdapter
from portfolio.adapters.clock import SystemClock
from portfolio.adapters.sqlite.migrator import SQLiteMigrator
from portfolio.adapters.sqlite_db import SQLiteUserRepo
from portfolio.api.deps import Settings
from portfolio.components.auth import CreateAdminInput, run_create_admin
from portfolio.domain.errors import PortfolioError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")


def handle_migrate(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()
    print(f"Applied {len(applied)} migration(s) to {settings.db_path}.")


def handle_create_admin(settings: Settings, args: argparse.Namespace) -> None:
    password = args.password or getpass.getpass("Admin password: ")
    # Only hashing is used here, so the signing key is irrelevant
    adapter = JWTAuthAdapter(settings.secret_key or "cli")
    repo = SQLiteUserRepo(settings.db_path)
    try:
        out = run_create_admin(
            CreateAdminInput(email=args.email, password=password, name=args.name),
            repo,
            adapter,
            SystemClock(),
        )
    except PortfolioError as e:
        logger.error("Could not create admin: %s", e.message)
        sys.exit(1)
    print(f"Admin user created: {out.user.email} ({out.user.id})")
    logger.info("%d admin account(s) on record", repo.count_admins())


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Portfolio backend CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # create-admin
    admin_parser = subparsers.add_parser("create-admin", help="Create an admin user")
    admin_parser.add_argument("email", help="Admin email address")
    admin_parser.add_argument("--name", default="Admin User", help="Display name")
    admin_parser.add_argument("--password", help="Password (prompted when omitted)")

    args = parser.parse_args(argv)
    settings = Settings()

    if args.command == "migrate":
        handle_migrate(settings)
    elif args.command == "create-admin":
        handle_create_admin(settings, args)


if __name__ == "__main__":
    main()
