from __future__ import annotations

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from school_admin.auth.gateway import AuthorizationGateway
from school_admin.configs.logging_config import get_logger, setup_logging
from school_admin.configs.settings import Settings, get_settings
from school_admin.errors import AppError
from school_admin.policies.registry import default_registry
from school_admin.repositories.mongo import get_mongo_client, get_mongo_db
from school_admin.repositories.sale_repository import SaleRepository
from school_admin.repositories.school_repository import SchoolRepository
from school_admin.routers.dashboard_router import router as dashboard_router
from school_admin.routers.health_router import router as health_router
from school_admin.routers.sale_router import router as sale_router
from school_admin.routers.school_router import router as school_router
from school_admin.services.dashboard_service import DashboardService
from school_admin.services.sale_service import SaleService
from school_admin.services.school_service import SchoolService
from school_admin.utils.response import failure

log = get_logger(__name__)


def _cors_origins(raw_origins) -> list[str]:
    # .env can provide a comma-separated string
    if isinstance(raw_origins, str):
        return [o.strip() for o in raw_origins.split(",") if o.strip()]
    if isinstance(raw_origins, (list, tuple, set)):
        return list(raw_origins)
    return []


def create_app() -> FastAPI:
    app = FastAPI(title="school_admin", version="0.1.0")
    settings: Settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(settings.CORS_ORIGINS),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        method = request.method
        path = request.url.path
        request_id = request.headers.get("x-request-id") or request.headers.get("x-correlation-id")

        log.info("request.start method=%s path=%s request_id=%s", method, path, request_id)
        status_code = "unknown"
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            log.info(
                "request.end method=%s path=%s status=%s request_id=%s elapsed_ms=%s",
                method,
                path,
                status_code,
                request_id,
                elapsed_ms,
            )

    app.include_router(health_router)
    app.include_router(dashboard_router)
    app.include_router(school_router)
    app.include_router(sale_router)

    @app.exception_handler(AppError)
    async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
        log.info(
            "request.error type=app_error status=%s code=%s message=%s",
            exc.http_status,
            exc.code,
            exc.message,
        )
        return JSONResponse(status_code=exc.http_status, content=failure(exc.message, exc.code))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
        log.exception("Unhandled error: %s", str(exc))
        return JSONResponse(status_code=500, content=failure("internal server error"))

    @app.on_event("startup")
    async def startup() -> None:
        setup_logging(settings.LOG_LEVEL)

        mongo_client = get_mongo_client(settings)
        mongo_db = get_mongo_db(mongo_client, settings)
        app.state.settings = settings
        app.state.mongo_client = mongo_client
        app.state.mongo_db = mongo_db

        gateway = AuthorizationGateway(default_registry(), bulk_max_items=settings.bulk_max_items)
        app.state.gateway = gateway

        school_repo = SchoolRepository(mongo_db)
        log.info("startup.ensure_indexes begin")
        await school_repo.ensure_indexes()
        log.info("startup.ensure_indexes done")

        app.state.dashboard_service = DashboardService(
            school_repo,
            recent_days=settings.dashboard_recent_days,
            recent_limit=settings.dashboard_recent_limit,
        )
        app.state.school_service = SchoolService(school_repo, gateway)
        app.state.sale_service = SaleService(SaleRepository(mongo_db), gateway)

    @app.on_event("shutdown")
    async def shutdown() -> None:
        log.info("shutdown.begin")
        mongo_client = getattr(app.state, "mongo_client", None)
        if mongo_client is not None:
            mongo_client.close()
        log.info("shutdown.done")

    return app


app = create_app()
