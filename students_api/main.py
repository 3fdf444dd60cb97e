import logging
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI

from students_api.api.router import api_router
from students_api.core.config import ConfigError, Settings, load_settings
from students_api.core.handlers import register_exception_handlers
from students_api.core.logging import setup_logging
from students_api.core.response import ok
from students_api.services.student.storage import StorageError, StudentStorage
from students_api.services.student.student import SQLStudentStorage


def create_app(settings: Settings, storage: StudentStorage, logger: logging.Logger) -> FastAPI:
    """
    Build the application around an already opened storage.

    The storage is closed when the application shuts down.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.PROJECT_NAME} in {settings.ENV} mode")
        yield
        logger.info("Server is shutting down")
        storage.close()
        logger.info("Server shutdown successfully")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.logger = logger

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health():
        """
        Health check endpoint
        """
        return ok()

    return app


def main(argv: Optional[List[str]] = None) -> None:
    logger = setup_logging()

    try:
        settings = load_settings(argv)
    except ConfigError as exc:
        logger.critical(str(exc))
        sys.exit(1)
    logger.setLevel(settings.LOG_LEVEL)

    try:
        storage = SQLStudentStorage.from_settings(settings, logger)
    except StorageError as exc:
        logger.critical(f"Storage initialization failed: {exc}")
        sys.exit(1)
    logger.info(f"Storage initialized, env={settings.ENV}, version={settings.APP_VERSION}")

    app = create_app(settings, storage, logger)

    logger.info(f"Server started, address={settings.HTTP_SERVER_ADDRESS}")
    # uvicorn handles SIGINT/SIGTERM: stop accepting, drain in-flight requests, run lifespan shutdown
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.LOG_LEVEL.lower(),
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT,
    )


if __name__ == "__main__":
    main()
