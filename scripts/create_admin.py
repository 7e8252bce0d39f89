#!/usr/bin/env python3
"""
Create an admin account (or promote an existing one) directly in the database.

Usage:
  python scripts/create_admin.py --email admin@example.com --name "Site Admin" [--password secret123] [--premium]
"""
from __future__ import annotations

import argparse
import getpass
import secrets

from cardfolio.core.security import hash_password
from cardfolio.db.create_tables import create_all
from cardfolio.repositories.sql_repository import SQLRepository


def main() -> None:
    ap = argparse.ArgumentParser(description="Create or promote a Cardfolio admin")
    ap.add_argument("--email", required=True, help="Account e-mail")
    ap.add_argument("--name", default="Administrator", help="Display name for a new account")
    ap.add_argument("--password", help="Password (default: prompt, or random when not interactive)")
    ap.add_argument("--premium", action="store_true", help="Also enable the premium tier")
    args = ap.parse_args()

    create_all()
    repo = SQLRepository()
    email = (args.email or "").strip().lower()
    if "@" not in email:
        raise SystemExit("Invalid e-mail")

    existing = repo.get_user_by_email(email)
    if existing:
        repo.set_user_role(existing.id, "admin")
        if args.premium:
            repo.set_user_premium(existing.id, True)
        print(f"OK: {email} is now an admin")
        return

    password = args.password
    generated = False
    if not password:
        try:
            password = getpass.getpass("Password: ")
        except (EOFError, KeyboardInterrupt):
            password = ""
        if not password:
            password = secrets.token_urlsafe(12)
            generated = True
    if len(password) < 8:
        raise SystemExit("Password must be at least 8 characters")

    user = repo.create_user(args.name.strip() or "Administrator", email, hash_password(password), role="admin", is_premium=args.premium)
    print("OK: admin created")
    print(f"  id:    {user.id}")
    print(f"  email: {user.email}")
    if generated:
        print(f"  password: {password}")


if __name__ == "__main__":
    main()
