import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from resume_builder.core.config import settings
from resume_builder.db.store import init_db
from resume_builder.services.analyzer_service import purge_old_analyses
from resume_builder.services.template_service import seed_default_templates

logger = logging.getLogger(__name__)

PURGE_INTERVAL_S = 3600


@asynccontextmanager
async def lifespan(app):
    init_db()
    if settings.seed_templates:
        seed_default_templates()
    purge_old_analyses()

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                deleted = purge_old_analyses()
                if any(deleted.values()):
                    logger.info("analysis_retention_purge deleted=%s", deleted)
            except Exception as exc:  # pragma: no cover
                logger.warning("analysis_retention_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=PURGE_INTERVAL_S)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
