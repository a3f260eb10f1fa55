"""
FastAPI Service - Main entry point for the MP3 Host API.

Downloads the audio track of a video with yt-dlp, hosts the resulting MP3
under /files and keeps the hosting directory under a size budget.
"""

import argparse
import os
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request  # type: ignore
from fastapi.responses import PlainTextResponse  # type: ignore
from fastapi.staticfiles import StaticFiles  # type: ignore
from starlette.exceptions import HTTPException as StarletteHTTPException  # type: ignore

from core.config import configure_settings, get_settings
from core.constants import FILES_ROUTE_PREFIX
from core.dependencies import validate_dependencies
from core.errors import ConfigError, StoreIOError
from core.logger import logger, setup_logger
from core.messages import ErrorMessages
from internal.api.routes.health_routes import router as health_router
from internal.api.routes.mp3_routes import router as mp3_router
from internal.api.utils import plain_http_exception_handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan - startup and shutdown.

    Creates the store directory, checks for the downloader and wires the
    DI container before the first request. A store that cannot be created
    is fatal; a missing downloader only warns.
    """
    settings = get_settings()
    logger.info(
        f"========== Starting {settings.app_name} v{settings.app_version} API service =========="
    )
    logger.info(f"Environment: {settings.environment}")
    logger.info(
        f"Store: {settings.files_dir} (budget {settings.dir_size_max_mb}MB, "
        f"max {settings.max_evictions_per_pass} eviction(s) per pass)"
    )

    from core.container import bootstrap_container, get_artifact_store

    bootstrap_container()
    logger.info("DI Container initialized")

    try:
        get_artifact_store().ensure_root()
    except StoreIOError as e:
        logger.error(f"FATAL: Cannot prepare store directory: {e}")
        raise RuntimeError(f"Cannot prepare store directory: {e}") from e

    validate_dependencies()

    logger.info(f"Serving {settings.files_dir} on HTTP port: {settings.api_port}")

    yield

    logger.info("========== API service stopped ==========")


def create_app() -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    description = """
## MP3 Host API

POST a video URL to `/mp3`, get back the URL of its audio as MP3.

### Processing Flow

1. **Request** - POST the raw video URL to `/mp3`
2. **Cache check** - Already-downloaded videos are answered immediately
3. **Download** - yt-dlp extracts the audio and encodes it to MP3
4. **Response** - `<host>/files/<id>.mp3`, served statically
5. **Eviction** - Oldest files are deleted once the directory exceeds its budget
    """

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=description,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "MP3", "description": "Video URL to hosted MP3."},
            {"name": "Health", "description": "Health check endpoints."},
        ],
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.include_router(mp3_router)
    app.include_router(health_router)

    # Directory is created in lifespan, so skip the mount-time check
    app.mount(
        FILES_ROUTE_PREFIX,
        StaticFiles(directory=settings.files_dir, check_dir=False),
        name="files",
    )

    app.add_exception_handler(StarletteHTTPException, plain_http_exception_handler)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Last-resort handler: log server-side, keep the body terse."""
        logger.error(f"Unhandled exception: {str(exc)}")
        logger.exception("Exception details:")
        return PlainTextResponse(ErrorMessages.INTERNAL_ERROR + "\n", status_code=500)

    return app


# Create application instance
# Run with: uvicorn app.main:app --host 0.0.0.0 --port 8100
app = create_app()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Command-line flags; each overrides the matching config file / env value."""
    parser = argparse.ArgumentParser(
        description="Host MP3s extracted from video URLs, within a size budget",
    )
    parser.add_argument(
        "-c", "--config", default=None, help="path to JSON config file (env: CONFIG_FILE)"
    )
    parser.add_argument("-p", "--port", type=int, default=None, help="port to serve on")
    parser.add_argument("--host", default=None, help="interface to bind")
    parser.add_argument(
        "-d", "--files-dir", default=None, help="the directory where files are hosted"
    )
    parser.add_argument(
        "-m",
        "--max-mb",
        type=int,
        default=None,
        help="maximum size of hosted directory in MB",
    )
    parser.add_argument(
        "-e", "--exec", dest="exec_path", default=None, help="path of the yt-dlp executable"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Parse flags, load configuration and run uvicorn. Exits 1 on bad config."""
    import uvicorn  # type: ignore

    args = parse_args(argv)
    config_path = args.config or os.environ.get("CONFIG_FILE")

    try:
        settings = configure_settings(
            config_path,
            api_port=args.port,
            api_host=args.host,
            files_dir=args.files_dir,
            dir_size_max_mb=args.max_mb,
            exec_path=args.exec_path,
        )
    except ConfigError as e:
        logger.error(f"Error getting config: {e}")
        sys.exit(1)

    setup_logger(force=True)

    # Singletons were built from the import-time settings
    from core.container import Container
    from infrastructure.filesystem.artifact_store import reset_artifact_store
    from infrastructure.ytdlp.fetcher import reset_ytdlp_fetcher

    Container.clear()
    reset_artifact_store()
    reset_ytdlp_fetcher()

    uvicorn.run(
        create_app(),
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
