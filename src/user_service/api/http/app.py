"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from src.user_service.api.http.app_data import (
    ApplicationDependencies,
    build_dependencies,
)
from src.user_service.api.http.routers.health import router as health_router
from src.user_service.api.http.routers.users import router as users_router
from src.user_service.api.http.schemas import Result
from src.user_service.api.utils.app_startup import configure_logging
from src.user_service.core.exceptions import (
    BusinessError,
    DeleteNotAllowedError,
    DuplicateUsernameError,
    NotFoundError,
    StorageError,
    UserServiceError,
)
from src.user_service.runtime.config.config_data import ConfigData
from src.user_service.runtime.context import get_config

__all__ = ["app", "create_app", "startup", "shutdown"]


def _envelope(status_code: int, message: str, request: Request) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    headers = {"X-Request-ID": request_id} if request_id else None
    return JSONResponse(
        status_code=status_code,
        content=Result.fail(status_code, message).model_dump(),
        headers=headers,
    )


_BUSINESS_STATUS: dict[type[BusinessError], int] = {
    NotFoundError: 404,
    DuplicateUsernameError: 409,
    DeleteNotAllowedError: 409,
}


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BusinessError)
    async def business_error_handler(request: Request, exc: BusinessError):
        status_code = _BUSINESS_STATUS.get(type(exc), 400)
        logger.bind(status_code=status_code, error_type=type(exc).__name__).warning(
            "Business error: {}", exc.message
        )
        return _envelope(status_code, exc.message, request)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.bind(status_code=500, error_type=type(exc).__name__).opt(
            exception=exc
        ).error("Storage failure: {}", exc.message)
        return _envelope(500, "Internal Server Error", request)

    @app.exception_handler(UserServiceError)
    async def service_error_handler(request: Request, exc: UserServiceError):
        logger.opt(exception=exc).error("Unhandled service error: {}", exc.message)
        return _envelope(500, "Internal Server Error", request)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.bind(status_code=422).info("request.validation_error: {}", message)
        return _envelope(422, message, request)


# --- Lifecycle hooks ---
async def startup(app: FastAPI) -> None:
    config = app.state.config
    configure_logging(config)
    logger.info("Starting up application in {} environment", config.app.environment)

    # Tests may install their own dependency graph before startup
    if getattr(app.state, "app_dependencies", None) is None:
        app.state.app_dependencies = build_dependencies(config)


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    config = app.state.config
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is None:
        return

    dispatcher = app_dependencies.dispatcher
    if config.events.shutdown_wait and not dispatcher.wait_for_idle(
        config.events.shutdown_timeout
    ):
        logger.warning("Subscribers still running after {}s", config.events.shutdown_timeout)
    # Anything not started by now is abandoned
    dispatcher.shutdown(wait=config.events.shutdown_wait, cancel_pending=True)


def create_app(
    dependencies: ApplicationDependencies | None = None,
    config: ConfigData | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        dependencies: Pre-built service graph; built from config at startup
            when omitted.
        config: Configuration to use instead of the current app context.
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup(app)
        try:
            yield
        finally:
            await shutdown(app)

    app = FastAPI(
        title="User Service",
        lifespan=lifespan,
        docs_url=None if config.app.environment == "production" else "/docs",
        redoc_url=None if config.app.environment == "production" else "/redoc",
    )
    app.state.config = config
    app.state.app_dependencies = dependencies

    # --- CORS configuration ---
    if config.app.environment == "production" and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )

    # --- Request logging middleware ---
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        base_ctx = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else "unknown",
        }

        start = time.perf_counter()
        with logger.contextualize(**base_ctx):
            try:
                logger.info("request.start")
                response = await call_next(request)

                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 1),
                ).info("request.end")

                response.headers.setdefault("X-Request-ID", request_id)
                return response

            except Exception as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=500,
                    duration_ms=round(duration_ms, 1),
                    error_type=type(exc).__name__,
                ).exception("request.error")
                return JSONResponse(
                    status_code=500,
                    content=Result.fail(500, "Internal Server Error").model_dump(),
                    headers={"X-Request-ID": request_id},
                )

    _register_exception_handlers(app)

    # --- Router registration ---
    app.include_router(health_router, prefix=config.app.api_prefix)
    app.include_router(users_router, prefix=config.app.api_prefix)

    return app


app = create_app()
