from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from devkit.observability import configure_logging, configure_otel, configure_probe_access_log_filter

from marker_api.dependencies import settings
from marker_api.errors import ApiError
from marker_api.middleware import ObservabilityMiddleware
from marker_api.response import error_response, success_response
from marker_api.routers.markers import router as markers_router


def create_app() -> FastAPI:
    app = FastAPI(title="Nearby Markers API", version="0.1.0")
    configure_logging(settings.LOG_LEVEL)
    configure_otel(service_name=settings.SERVICE_NAME)
    configure_probe_access_log_filter()
    app.add_middleware(ObservabilityMiddleware, service_name=settings.SERVICE_NAME)
    app.include_router(markers_router)

    @app.get("/healthz")
    async def healthz() -> dict:
        return success_response({"status": "ok"}, meta={})

    @app.get("/readyz")
    async def readyz() -> dict:
        return success_response({"status": "ready"}, meta={})

    @app.exception_handler(ApiError)
    async def handle_api_error(_: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_response(exc.code, exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        message = "; ".join(err["msg"] for err in exc.errors())
        return JSONResponse(
            status_code=422,
            content=error_response("VALIDATION_ERROR", message),
        )

    return app


app = create_app()
