"""Background loop deleting refresh-token rows past their expiry."""

from __future__ import annotations

import asyncio
import logging

from onlineshops.core.config import settings
from onlineshops.db.session import SessionLocal
from onlineshops.services.auth import cleanup_expired_tokens

logger = logging.getLogger(__name__)

_task: asyncio.Task | None = None


def run_once() -> int:
    db = SessionLocal()
    try:
        return cleanup_expired_tokens(db)
    except Exception as exc:  # noqa: BLE001
        db.rollback()
        logger.warning("Refresh token cleanup failed: %s", exc)
        return 0
    finally:
        db.close()


async def _loop() -> None:
    startup_delay = max(0, settings.TOKEN_CLEANUP_STARTUP_DELAY_SECONDS)
    interval = max(60, settings.TOKEN_CLEANUP_INTERVAL_SECONDS)
    if startup_delay:
        await asyncio.sleep(startup_delay)
    while True:
        await asyncio.to_thread(run_once)
        await asyncio.sleep(interval)


async def start_token_cleanup() -> None:
    global _task
    if _task is not None:
        return
    if not settings.TOKEN_CLEANUP_ENABLED:
        return
    _task = asyncio.create_task(_loop(), name="refresh-token-cleanup")
    logger.info("Refresh token cleanup loop started (every %s seconds)", max(60, settings.TOKEN_CLEANUP_INTERVAL_SECONDS))


async def stop_token_cleanup() -> None:
    global _task
    task = _task
    _task = None
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
