#!/usr/bin/env python3
"""
Create an administrator, or reset the password of an existing one.

Usage:
  python scripts/create_admin.py --username alice [--password s3cret] [--reset]

Uses the backend selected by STORAGE_BACKEND / DATA_FILE / DATABASE_URL.
"""
from __future__ import annotations

import argparse
import getpass
import sys
from pathlib import Path

# make the medinfo package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from medinfo.core.security import generate_password  # noqa: E402
from medinfo.repositories import get_record_store  # noqa: E402
from medinfo.repositories.errors import AdministratorExistsError, AdministratorNotFoundError  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Create or reset a catalog administrator")
    ap.add_argument("--username", required=True, help="Login name (case-sensitive)")
    ap.add_argument("--password", help="Password (default: prompt, or random with --generate)")
    ap.add_argument("--generate", action="store_true", help="Generate a random password")
    ap.add_argument("--reset", action="store_true", help="Reset the password of an existing admin")
    args = ap.parse_args()

    username = (args.username or "").strip()
    if not username:
        raise SystemExit("Invalid username")
    if args.generate:
        password = generate_password()
    else:
        password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        raise SystemExit("Password must have at least 8 characters")

    store = get_record_store()
    store.initialize()
    try:
        if args.reset:
            store.set_administrator_password(username, password)
            print(f"OK: password reset for '{username}'")
        else:
            admin = store.add_administrator(username, password)
            print(f"OK: admin '{admin.username}' created (id {admin.id})")
    except AdministratorExistsError:
        raise SystemExit(f"Admin '{username}' already exists (use --reset)")
    except AdministratorNotFoundError:
        raise SystemExit(f"Admin '{username}' does not exist")
    if args.generate:
        print(f"  Password: {password}")


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
