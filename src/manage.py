"""Storefront database management CLI.

Provides commands to create and drop the database schema of every domain,
to load demo data into a fresh database and to purge expired sessions.
PROTEAN_ENV selects the database, as it does for the web application.

Usage:
    python src/manage.py setup-db         # Create all tables
    python src/manage.py drop-db          # Drop all tables
    python src/manage.py seed             # Create demo products and accounts
    python src/manage.py purge-sessions   # Delete sessions idle for too long
"""

import argparse
import sys

DOMAIN_NAMES = ["identity", "inventory", "ordering"]

DEMO_PRODUCTS = [
    {"name": "Wireless Mouse", "description": "Ergonomic 2.4GHz mouse", "price": "24.90", "stock": 50},
    {"name": "Mechanical Keyboard", "description": "Tenkeyless, brown switches", "price": "89.00", "stock": 20},
    {"name": "USB-C Hub", "description": "7-in-1 adapter with HDMI", "price": "39.99", "stock": 35},
    {"name": "27-inch Monitor", "description": "QHD IPS panel", "price": "279.00", "stock": 8},
    {"name": "Laptop Stand", "description": "Adjustable aluminium stand", "price": "32.50", "stock": 0},
]

DEMO_ACCOUNTS = [
    {"email": "admin@example.com", "name": "Store Admin", "password": "admin123", "admin": True},
    {"email": "user@example.com", "name": "Demo Customer", "password": "user123", "admin": False},
]


def _domains(names=None) -> dict:
    from identity.domain import identity
    from inventory.domain import inventory
    from ordering.domain import ordering

    all_domains = {"identity": identity, "inventory": inventory, "ordering": ordering}
    return {name: all_domains[name] for name in names} if names else all_domains


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def seed_database():
    """Load demo products and accounts, skipping what already exists."""
    setup_databases()

    from identity.authentication import register_user
    from identity.domain import identity
    from identity.roles import Role
    from identity.user import User
    from inventory.domain import inventory
    from inventory.product import Product
    from shared.money import to_minor_units

    with identity.domain_context():
        users = identity.repository_for(User)
        for account in DEMO_ACCOUNTS:
            if users.find_by_email(account["email"]) is not None:
                print(f"  {account['email']} already exists, skipping.")
                continue
            roles = (Role.USER, Role.ADMIN) if account["admin"] else (Role.USER,)
            register_user(account["email"], account["name"], account["password"], roles=roles)
            print(f"  Created account {account['email']}")

    with inventory.domain_context():
        products = inventory.repository_for(Product)
        if products.list_all():
            print("  Products already present, skipping.")
        else:
            for item in DEMO_PRODUCTS:
                products.add(
                    Product(
                        name=item["name"],
                        description=item["description"],
                        price_cents=to_minor_units(item["price"]),
                        stock=item["stock"],
                    )
                )
            print(f"  Created {len(DEMO_PRODUCTS)} products")

    print("Done.")


def purge_sessions(max_age_days=None):
    """Delete stored sessions that have been idle for longer than the maximum age."""
    from datetime import timedelta

    from identity.domain import identity
    from identity.session import DEFAULT_MAX_AGE, SqlSessionStore

    identity.init()
    max_age = timedelta(days=max_age_days) if max_age_days is not None else DEFAULT_MAX_AGE
    purged = SqlSessionStore(identity, max_age=max_age).purge_expired()
    print(f"Purged {purged} expired session(s).")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to drop (default: all)",
    )

    subparsers.add_parser("seed", help="Create the schema and load demo data")

    purge_parser = subparsers.add_parser("purge-sessions", help="Delete expired sessions")
    purge_parser.add_argument("--max-age-days", type=int, default=None, help="Idle time before a session expires")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "seed":
        seed_database()
    elif args.command == "purge-sessions":
        purge_sessions(args.max_age_days)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
