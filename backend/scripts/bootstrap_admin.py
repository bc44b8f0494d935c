"""Create or promote an admin account (admins cannot self-register).

Usage:
    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD=... python scripts/bootstrap_admin.py
    python scripts/bootstrap_admin.py --email admin@example.com --password ... --first-name Ada --last-name Admin
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.append(str(BASE_DIR))

from onlineshops.core.config import settings  # noqa: E402
from onlineshops.core.exceptions import ConflictError  # noqa: E402
from onlineshops.core.logging import setup_logging  # noqa: E402
from onlineshops.db.session import SessionLocal  # noqa: E402
from onlineshops.models.enums import UserRole  # noqa: E402
from onlineshops.schemas.user import UserCreate  # noqa: E402
from onlineshops.services.auth import find_user_by_email  # noqa: E402
from onlineshops.services.users import create_user  # noqa: E402

logger = logging.getLogger("bootstrap_admin")


def bootstrap_admin(email: str, password: str, first_name: str, last_name: str) -> str:
    db = SessionLocal()
    try:
        existing = find_user_by_email(db, email)
        if existing:
            if existing.role == UserRole.admin:
                logger.info("User %s is already an admin", existing.id)
                return "already_admin"
            existing.role = UserRole.admin
            db.add(existing)
            db.commit()
            logger.info("Promoted user %s to admin", existing.id)
            return "promoted"
        try:
            user = create_user(
                db,
                UserCreate(
                    email=email,
                    password=password,
                    first_name=first_name,
                    last_name=last_name,
                    role=UserRole.admin,
                ),
            )
        except ConflictError:
            logger.warning("Admin %s was created concurrently", email)
            return "conflict"
        logger.info("Created admin user %s", user.id)
        return "created"
    finally:
        db.close()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"))
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"))
    parser.add_argument("--first-name", default=os.getenv("ADMIN_FIRST_NAME", "Admin"))
    parser.add_argument("--last-name", default=os.getenv("ADMIN_LAST_NAME", "User"))
    args = parser.parse_args()
    if not args.email or not args.password:
        parser.error("--email and --password (or ADMIN_EMAIL / ADMIN_PASSWORD) are required")

    setup_logging(settings.LOG_LEVEL)
    bootstrap_admin(args.email, args.password, args.first_name, args.last_name)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
