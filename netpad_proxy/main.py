"""
FastAPI Proxy Application Factory
=================================

This is the main entry point for the local proxy that sits between a code
assistant (Cursor and other MCP clients) and a NetPad server.

Architecture:
    Code Assistant → NetPad MCP Proxy (this service) → NetPad /api/mcp

Routers:
    - /, /tools, /tools/{id}, /schema, /command : Proxied MCP endpoints
    - /api/openai-functions                     : OpenAI function discovery

Environment Variables (all optional, prefixed NETPAD_PROXY_):
    - LOG_LEVEL: Logging level (default: INFO)
    - DEBUG: Log every inbound request
    - CONFIG_PATH: Credential file (default: ~/.config/netpad-mcp-proxy/config.json)
    - UPSTREAM_TIMEOUT_SECONDS: Outbound timeout (default: none)
    - ALLOWED_ORIGINS: Comma-separated CORS origins (default: *)

Running the Service:
    Recommended:
        netpad-mcp-proxy serve

    With uvicorn directly:
        uvicorn netpad_proxy.main:app --port 7777
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from netpad_proxy import __version__
from netpad_proxy.config import Settings, get_settings, mask_api_key
from netpad_proxy.credentials import (
    API_KEY,
    NETPAD_URL,
    CredentialStore,
    create_store,
)
from netpad_proxy.exceptions import ProxyError
from netpad_proxy.forwarding import RequestForwarder, create_upstream_client, router as proxy_router
from netpad_proxy.models import ErrorResponse

logger = logging.getLogger("netpad_proxy.main")


# Configure structured JSON logging
def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def not_found_response(request: Request) -> JSONResponse:
    """Fixed payload for any method/path the proxy does not serve."""
    return JSONResponse(
        status_code=404,
        content=ErrorResponse(
            status=404,
            message="Endpoint not found",
            error={
                "code": "NOT_FOUND",
                "message": f"{request.method} {request.url.path} not found",
            },
        ).model_dump(),
    )


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup tasks:
        - Configure logging
        - Open the shared HTTP client for NetPad
        - Create the RequestForwarder
        - Log service startup information

    Shutdown tasks:
        - Close the HTTP client
    """
    settings: Settings = app.state.settings
    store: CredentialStore = app.state.store

    setup_logging(settings.LOG_LEVEL)

    client = create_upstream_client(settings)
    app.state.forwarder = RequestForwarder(client, store, settings)

    logger.info(
        "NetPad MCP proxy started",
        extra={
            "netpad_url": store.get(NETPAD_URL),
            "api_key": mask_api_key(store.get(API_KEY)),
            "version": __version__,
        }
    )

    yield

    logger.info("Shutting down NetPad MCP proxy")
    await client.aclose()


# Create FastAPI application
def create_app(
    settings: Optional[Settings] = None,
    store: Optional[CredentialStore] = None,
) -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management
        - CORS middleware
        - Optional request logging
        - Route handlers
        - Exception handlers

    Args:
        settings: Process settings (defaults to get_settings())
        store: Credential store (defaults to the JSON file store)

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="NetPad MCP Proxy",
        description="Local MCP proxy forwarding code-assistant requests to NetPad",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.store = store if store is not None else create_store(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.DEBUG:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            logger.info(f"{request.method} {request.url}")
            return await call_next(request)

    app.include_router(proxy_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Unknown routes and unsupported methods get the fixed 404 payload."""
        if exc.status_code in (404, 405):
            return not_found_response(request)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                status=exc.status_code,
                message=str(exc.detail),
                error={"code": "HTTP_ERROR", "message": str(exc.detail)},
            ).model_dump(),
        )

    @app.exception_handler(ProxyError)
    async def proxy_exception_handler(request: Request, exc: ProxyError) -> JSONResponse:
        logger.warning(
            f"{exc.code}: {exc.message}",
            extra={"path": request.url.path, "method": request.method},
        )
        error = {"code": exc.code, "message": exc.message}
        if exc.suggestion:
            error["suggestion"] = exc.suggestion

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                status=exc.status_code,
                message=exc.message,
                error=error,
            ).model_dump(),
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled errors.

        Logs the error and returns a standardized error response.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                status=500,
                message="An unexpected error occurred",
                error={
                    "code": "INTERNAL_ERROR",
                    "message": str(exc) if settings.LOG_LEVEL == "DEBUG" else None,
                },
            ).model_dump(),
        )

    return app


# Create app instance for uvicorn
app = create_app()
