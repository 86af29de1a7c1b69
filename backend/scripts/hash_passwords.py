#!/usr/bin/env python3
"""One-time migration of plaintext passwords in the data file to bcrypt hashes.

Data files written by the original signup flow store passwords in clear, and
those accounts cannot log in until migrated. Run from the backend/ directory:

    python3 scripts/hash_passwords.py [--data-file PATH] [--dry-run] [--verbose]

Users whose password is already a bcrypt hash are left untouched, so running
the script twice is safe.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from hrdesk.core.config import Settings  # noqa: E402
from hrdesk.core.security import get_password_hash, is_password_hash  # noqa: E402
from hrdesk.store.document_store import DocumentStore  # noqa: E402

logger = logging.getLogger(__name__)


def hash_plaintext_passwords(users: list[dict[str, Any]]) -> tuple[int, int]:
    """Hash every plaintext password in place.

    Returns ``(migrated, skipped)``; users without a password count as skipped.
    """
    migrated = 0
    skipped = 0
    for user in users:
        password = user.get("password")
        if not isinstance(password, str) or not password or is_password_hash(password):
            skipped += 1
            continue
        user["password"] = get_password_hash(password)
        migrated += 1
        logger.debug("Hashed password for %s", user.get("loginId") or user.get("email"))
    return migrated, skipped


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Replace plaintext passwords in the HR Desk data file with bcrypt hashes",
    )
    parser.add_argument(
        "--data-file",
        default=None,
        help="Path to the JSON data file (default: DATA_FILE setting)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing the file",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return parser.parse_args(argv)


def migrate(args: argparse.Namespace) -> int:
    settings = Settings()
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    store = DocumentStore(args.data_file or settings.DATA_FILE)
    logger.info("Migrating passwords in %s", store.path)

    with store.transaction() as txn:
        migrated, skipped = hash_plaintext_passwords(txn.collection("users"))
        if migrated and not args.dry_run:
            txn.mark_dirty()

    logger.info("Migrated: %d", migrated)
    logger.info("Skipped: %d", skipped)
    if args.dry_run:
        logger.info("[DRY RUN] Data file was not modified.")
    return migrated


def main() -> None:
    args = parse_args()
    migrate(args)


if __name__ == "__main__":
    main()
