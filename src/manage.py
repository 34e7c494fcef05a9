"""Orderline management CLI.

Creates and drops the Ordering database schema and loads demo data.

Usage:
    python src/manage.py setup-db    # Create all tables
    python src/manage.py drop-db     # Drop all tables
    python src/manage.py seed-demo   # Place the demo orders
"""

import argparse
import sys


def _ordering():
    from ordering.config import get_settings
    from ordering.domain import ordering
    from ordering.utils.logging import configure_logging

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_dir)

    print("Initializing ordering domain...")
    ordering.init()
    return ordering


def setup_database():
    """Create the Ordering schema in every relational provider."""
    from ordering.utils.db import setup_db

    domain = _ordering()
    print("Creating ordering database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    """Drop the Ordering schema from every relational provider."""
    from ordering.utils.db import drop_db

    domain = _ordering()
    print("Dropping ordering database schema...")
    drop_db(domain)
    print("Done.")


def seed_demo_data():
    from ordering.seed import seed_demo

    domain = _ordering()
    print("Placing demo orders...")
    created = seed_demo(domain)
    print(f"  {len(created)} order(s) created.")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Orderline database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed-demo", help="Place the demo orders if the store is empty")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-demo":
        seed_demo_data()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
