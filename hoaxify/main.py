import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from hoaxify.config import get_settings
from hoaxify.database import create_tables
from hoaxify.errors import setup_exception_handlers
from hoaxify.routers import auth, hoaxes, users
from hoaxify.services import cleanup_worker
from hoaxify.services.file_store import LocalFileStore, get_attachment_store, get_profile_store

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Hoaxify API")
    create_tables()

    tasks = []
    if settings.enable_background_sweeps:
        tasks.append(asyncio.create_task(cleanup_worker.run_periodically(
            "token", settings.token_sweep_interval_seconds, cleanup_worker.sweep_expired_tokens,
        )))
        tasks.append(asyncio.create_task(cleanup_worker.run_periodically(
            "attachment", settings.attachment_sweep_interval_seconds, cleanup_worker.sweep_orphan_attachments,
        )))

    yield

    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    logger.info("Hoaxify API stopped")


def create_app() -> FastAPI:
    app = FastAPI(title="Hoaxify", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(users.router, prefix=settings.api_prefix)
    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(hoaxes.router, prefix=settings.api_prefix)

    # uploaded files are only served from here when they live on local disk
    profile_store = get_profile_store()
    attachment_store = get_attachment_store()
    if isinstance(profile_store, LocalFileStore):
        app.mount("/images", StaticFiles(directory=profile_store.folder), name="images")
    if isinstance(attachment_store, LocalFileStore):
        app.mount("/attachments", StaticFiles(directory=attachment_store.folder), name="attachments")

    @app.get("/")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()
