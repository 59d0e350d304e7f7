import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from cvbuilder.core.config import settings
from cvbuilder.storage.db import init_db
from cvbuilder.storage.sessions import purge_expired_sessions

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    init_db()
    purged = purge_expired_sessions()
    if purged:
        logger.info("expired_sessions_purged deleted=%s", purged)

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=settings.session_purge_interval_s)
                continue
            except asyncio.TimeoutError:
                pass
            try:
                deleted = purge_expired_sessions()
                if deleted:
                    logger.info("expired_sessions_purged deleted=%s", deleted)
            except Exception as exc:  # pragma: no cover - keeps the loop alive
                logger.warning("expired_sessions_purge_failed: %s", exc)

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
