from __future__ import annotations

import logging

from litestar import Litestar, Router
from litestar.config.cors import CORSConfig
from litestar.connection import Request
from litestar.enums import MediaType
from litestar.exceptions import HTTPException
from litestar.logging import LoggingConfig
from litestar.openapi import OpenAPIConfig
from litestar.response import Response

from promptbench import __version__

from .api.routes import router as api_router
from .core.config import Settings, get_settings
from .core.state import AppState
from .dependencies import build_dependencies


logger = logging.getLogger(__name__)


def http_error_handler(request: Request, exc: HTTPException) -> Response:
    # 400 for bad or missing input, 404 for absent records; same body shape as 500s.
    return Response(
        content={"error": exc.detail},
        media_type=MediaType.JSON,
        status_code=exc.status_code,
    )


def internal_error_handler(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return Response(content={"error": str(exc)}, media_type=MediaType.JSON, status_code=500)


def create_app(settings: Settings | None = None, state: AppState | None = None) -> Litestar:
    settings = settings or get_settings()
    state = state or AppState(settings)

    cors_config = None
    if settings.allowed_origins:
        cors_config = CORSConfig(
            allow_origins=settings.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    api_prefix = settings.api_prefix or "/api"
    api_routes = Router(path=api_prefix, route_handlers=[api_router])

    logging_config = LoggingConfig(
        root={"level": settings.log_level, "handlers": ["queue_listener"]},
        loggers={
            "promptbench": {
                "level": settings.log_level,
                "handlers": ["queue_listener"],
                "propagate": False,
            }
        },
        log_exceptions="never",
    )

    return Litestar(
        route_handlers=[api_routes],
        dependencies=build_dependencies(state),
        exception_handlers={
            HTTPException: http_error_handler,
            Exception: internal_error_handler,
        },
        on_startup=[state.startup],
        on_shutdown=[state.shutdown],
        cors_config=cors_config,
        logging_config=logging_config,
        debug=settings.debug,
        openapi_config=OpenAPIConfig(title=settings.app_name, version=__version__),
    )
