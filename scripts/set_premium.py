#!/usr/bin/env python3
"""
Turn the premium tier on or off for an account.

Usage:
  python scripts/set_premium.py --email user@example.com [--off]
"""
from __future__ import annotations

import argparse

from cardfolio.repositories.sql_repository import SQLRepository


def main() -> None:
    ap = argparse.ArgumentParser(description="Toggle premium for a Cardfolio user")
    ap.add_argument("--email", required=True, help="Account e-mail")
    ap.add_argument("--off", action="store_true", help="Disable premium instead of enabling it")
    args = ap.parse_args()

    repo = SQLRepository()
    user = repo.get_user_by_email(args.email)
    if not user:
        raise SystemExit(f"User '{args.email}' not found")
    repo.set_user_premium(user.id, not args.off)
    print(f"OK: premium {'disabled' if args.off else 'enabled'} for {user.email}")


if __name__ == "__main__":
    main()
