"""
Main FastAPI application for the GanhaPlus wallet API.
Serves health, auth, wallet, admin review and metrics.
"""
import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import ganhaplus.models  # noqa: F401  (register tables on Base.metadata)
from ganhaplus.api.routes import admin, auth, health, wallet
from ganhaplus.core.config import Settings, get_settings
from ganhaplus.core.errors import InternalError, ValidationError, WalletError
from ganhaplus.core.logging import configure_logging
from ganhaplus.db.base import Base
from ganhaplus.db.session import build_engine, build_session_factory
from ganhaplus.ledger import UserLocks
from ganhaplus.services.auth.login_rate_limit import LoginRateLimiter
from ganhaplus.utils.metrics import metrics, router as metrics_router

logger = logging.getLogger("http")


def _error_response(error: WalletError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"sucesso": False, "erro": error.message})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="GanhaPlus API",
        description="Rewarded ads, share rewards and withdrawals",
        version="1.0.0",
    )

    engine = build_engine(settings)
    Base.metadata.create_all(engine)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.user_locks = UserLocks()
    app.state.login_limiter = LoginRateLimiter(settings)

    # CORS
    origins = settings.cors_origins_list or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get(settings.request_id_header) or str(uuid4())
        started = time.perf_counter()
        status_code = 500  # call_next raises for unhandled errors
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            elapsed = time.perf_counter() - started
            metrics.observe_request(request.method, status_code, elapsed)
            logger.info(
                "http_request",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "latency_ms": round(elapsed * 1000, 1),
                },
            )
        response.headers[settings.request_id_header] = request_id
        return response

    @app.exception_handler(WalletError)
    async def wallet_error_handler(request: Request, exc: WalletError) -> JSONResponse:
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(ValidationError("Dados inválidos"))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", extra={"path": request.url.path, "error": str(exc)})
        return _error_response(InternalError())

    # Routers
    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router)
    app.include_router(wallet.router)
    app.include_router(admin.router)
    app.include_router(metrics_router)

    return app

