"""
Main entry point for the Recipe Catalog backend.

Provides database administration commands:

    recipe-catalog init-db            Create any missing tables
    recipe-catalog reset-db --confirm Drop and recreate every table
"""

import argparse
import sys
import traceback
from typing import List, Optional

from src.services.database import close_connections, initialize_app_database, reset_database
from src.services.logging_utils import configure_logging
from src.utils.config import get_config


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="recipe-catalog",
        description="Recipe Catalog database administration",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create database tables if they do not exist")

    reset_parser = subparsers.add_parser("reset-db", help="Drop and recreate all tables")
    reset_parser.add_argument(
        "--confirm",
        action="store_true",
        help="Required: confirms that all data will be deleted",
    )
    return parser


def initialize_application() -> bool:
    """
    Initialize the application database.

    Returns:
        True if initialization successful, False otherwise
    """
    try:
        print("Initializing database...")
        initialize_app_database()
        print("Database initialized successfully")
        return True

    except Exception as e:
        print(f"ERROR: Failed to initialize application: {e}")
        traceback.print_exc()
        return False


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command-line entry point.

    Args:
        argv: Arguments (defaults to sys.argv[1:])

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    config = get_config()
    configure_logging(config.log_level)
    print(f"{config.app_name} v{config.app_version}")
    print(f"Environment: {config.environment}")

    try:
        if args.command == "init-db":
            return 0 if initialize_application() else 1

        if args.command == "reset-db":
            if not args.confirm:
                print("Refusing to reset the database without --confirm")
                return 2
            reset_database(confirm=True)
            print("Database reset successfully")
            return 0

        return 2

    finally:
        close_connections()


if __name__ == "__main__":
    sys.exit(main())
