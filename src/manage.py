"""Sama Boutique database management CLI.

Creates or drops the tables backing the boutique domain when it is configured
with a SQL database (see the ``sqlite`` and ``production`` overlays in
``boutique/domain.toml``). The in-memory default needs neither.

Usage:
    PROTEAN_ENV=sqlite python src/manage.py setup-db
    PROTEAN_ENV=sqlite python src/manage.py drop-db
"""

import argparse
import sys


def _domain():
    from boutique.domain import boutique

    boutique.init()
    return boutique


def setup_database():
    from boutique.utils.db import setup_db

    domain = _domain()
    print(f"Creating {domain.name} database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from boutique.utils.db import drop_db

    domain = _domain()
    print(f"Dropping {domain.name} database schema...")
    drop_db(domain)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Sama Boutique database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
