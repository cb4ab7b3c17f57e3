# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import config
from core.errors import register_exception_handlers
from core.logging_config import setup_logging
from core.middleware import ProcessTimeMiddleware
from database.session import build_engine, build_sessionmaker
from service.identity import IdentityClient
from service.storage import StorageClient
from app.routers import register_routers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    engine = build_engine()
    app.state.engine = engine
    app.state.sessionmaker = build_sessionmaker(engine)
    app.state.identity_client = IdentityClient.from_config()
    app.state.storage_client = StorageClient.from_config()

    if config.ADMIN_OVERRIDE_PASSCODE:
        logger.warning("admin override passcode is enabled")
    logger.info("startup complete: db=%s", engine.url.render_as_string(hide_password=True))

    try:
        yield
    finally:
        app.state.identity_client.close()
        app.state.storage_client.close()
        engine.dispose()
        logger.info("shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Seller Leaderboard API",
        version="0.1.0",
        description="Seller result submissions, admin review and public leaderboard",
        lifespan=lifespan,
    )

    app.add_middleware(ProcessTimeMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routers(app)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=9000, reload=True)
