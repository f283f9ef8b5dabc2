import asyncio
import contextlib
import logging

from dotenv import load_dotenv

# Load environment variables from .env file before reading any configuration
load_dotenv()

import uvicorn  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from tracker import config  # noqa: E402
from tracker.auth.sessions import SessionRegistry, get_session_store, run_cleanup  # noqa: E402
from tracker.database.config import create_tables, engine  # noqa: E402
from tracker.error_handlers import register_error_handlers  # noqa: E402
from tracker.middleware.timing import timing_middleware  # noqa: E402
from tracker.routes import (  # noqa: E402
    auth_router,
    comments_router,
    issues_router,
    labels_router,
    milestones_router,
)

logger = logging.getLogger(__name__)

@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create tables and open the session store
    await create_tables()

    store = await get_session_store()
    app.state.session_registry = SessionRegistry(store, ttl_seconds=config.SESSION_TTL_SECONDS)

    cleanup_task = None
    if config.SESSION_BACKEND == "sqlite":
        cleanup_task = asyncio.create_task(
            run_cleanup(app.state.session_registry, config.SESSION_CLEANUP_INTERVAL)
        )
    logger.info("Issue tracker started", extra={"session_backend": config.SESSION_BACKEND})

    yield

    # Shutdown: Stop cleanup, close the session store and dispose of the engine
    if cleanup_task is not None:
        cleanup_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup_task
    await app.state.session_registry.close()
    await engine.dispose()

app = FastAPI(title="Issue Tracker", lifespan=lifespan)

app.middleware("http")(timing_middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(levelname)s | %(name)s | %(message)s",
)

register_error_handlers(app)

app.include_router(auth_router)
app.include_router(issues_router)
app.include_router(comments_router)
app.include_router(labels_router)
app.include_router(milestones_router)


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}


def run() -> None:
    """Serve the app with uvicorn on API_HOST:API_PORT."""
    uvicorn.run("main:app", host=config.API_HOST, port=config.API_PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
