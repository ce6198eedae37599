import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sunpulse import __version__
from sunpulse.api.api import api_router
from sunpulse.core.config import Settings, settings as default_settings
from sunpulse.core.errors import AggregationFailure
from sunpulse.services.cache import TTLCache
from sunpulse.services.gateway import GatewayService
from sunpulse.services.solar_sources import SolarSources

logger = logging.getLogger(__name__)

NO_STORE = {"Cache-Control": "no-store"}


def build_gateway(settings: Settings) -> GatewayService:
    ttls = settings.cache_ttls
    return GatewayService(
        sources=SolarSources(),
        cache=TTLCache(default_ttl=ttls.default),
        ttls=ttls,
    )


def create_app(settings: Settings = default_settings, gateway: Optional[GatewayService] = None) -> FastAPI:
    gateway = gateway or build_gateway(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{settings.PROJECT_NAME} gateway starting")
        yield
        gateway.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Space weather and ephemeris gateway: cached snapshot, alerts, CMEs, planets and active regions.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.gateway = gateway

    @app.middleware("http")
    async def read_only(request: Request, call_next):
        # Only reads are served; nothing may be cached downstream.
        if request.method != "GET":
            return JSONResponse(status_code=405, content={"error": "method_not_allowed"}, headers=NO_STORE)
        response = await call_next(request)
        response.headers.update(NO_STORE)
        return response

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.exception_handler(AggregationFailure)
    async def aggregation_failure(request: Request, exc: AggregationFailure):
        logger.error(f"{request.url.path} failed ({exc.code}): {exc.__cause__!r}")
        return JSONResponse(status_code=500, content={"error": exc.code}, headers=NO_STORE)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            content = {"error": "not_found"}
        elif exc.status_code == 405:
            content = {"error": "method_not_allowed"}
        else:
            content = {"error": str(exc.detail)}
        return JSONResponse(status_code=exc.status_code, content=content, headers=NO_STORE)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error(f"Unhandled gateway error on {request.url.path}: {exc!r}")
        return JSONResponse(status_code=500, content={"error": "internal_error"}, headers=NO_STORE)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "generatedAt": int(time.time() * 1000)}

    app.include_router(api_router)
    return app


app = create_app()
