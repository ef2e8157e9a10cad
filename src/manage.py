"""Storefront database management CLI.

Creates or drops the relational schema for the storefront domain when its
default database points at PostgreSQL or SQLite.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py create-admin --external-id 'idp|ops' --email ops@example.com
"""

import argparse
import sys


def setup_database():
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating storefront database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping storefront database schema...")
    drop_db(storefront)
    print("Done.")


def create_admin(external_id, email):
    """Register (or refresh) a directory user and grant the admin role.

    Role changes through the API need an existing administrator, so the first
    one is created here.
    """
    from protean.utils.globals import current_domain

    from storefront.domain import storefront
    from storefront.user.registration import RegisterUser
    from storefront.user.user import User

    storefront.init()
    with storefront.domain_context():
        user_id = current_domain.process(RegisterUser(external_id=external_id, email=email), asynchronous=False)
        repo = current_domain.repository_for(User)
        user = repo.get(user_id)
        user.change_role("admin", changed_by="manage.py")
        repo.add(user)
    print(f"Administrator {email}: {user_id}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    admin_parser = subparsers.add_parser("create-admin", help="Register a user with the admin role")
    admin_parser.add_argument("--external-id", required=True)
    admin_parser.add_argument("--email", required=True)

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        create_admin(args.external_id, args.email)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
