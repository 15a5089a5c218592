#!/usr/bin/env python3
"""
Mark an owner account as DELETED and drop its active sessions.

The id stays reserved: deleted owners cannot log in and the id can never be
signed up again.

Usage:
  python scripts/delete_owner.py --id chef1
"""
from __future__ import annotations

import argparse
import sys

from delfood.core.app_logging import configure_logging
from delfood.repositories.owner_repository import SQLOwnerRepository
from delfood.services.session_service import SessionManager, SQLSessionStore


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Delete (deactivate) an owner account")
    ap.add_argument("--id", required=True, dest="owner_id", help="Owner id to delete")
    args = ap.parse_args(argv)

    configure_logging()
    owner_id = (args.owner_id or "").strip()
    if not owner_id:
        raise SystemExit("Invalid owner id")

    repo = SQLOwnerRepository()
    if not repo.mark_deleted(owner_id):
        raise SystemExit(f"Owner '{owner_id}' not found")
    SessionManager(store=SQLSessionStore()).revoke_owner(owner_id)

    print("OK: owner deleted")
    print(f"  ID: {owner_id}")


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
