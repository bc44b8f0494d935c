"""Delete expired refresh tokens once, for cron-style scheduling outside the API process."""

from __future__ import annotations

import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.append(str(BASE_DIR))

from onlineshops.core.config import settings  # noqa: E402
from onlineshops.core.logging import setup_logging  # noqa: E402
from onlineshops.db.session import SessionLocal  # noqa: E402
from onlineshops.services.auth import cleanup_expired_tokens  # noqa: E402


def main() -> int:
    setup_logging(settings.LOG_LEVEL)
    db = SessionLocal()
    try:
        deleted = cleanup_expired_tokens(db)
    finally:
        db.close()
    print(f"deleted={deleted}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
