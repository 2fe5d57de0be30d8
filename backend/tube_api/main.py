import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.tube_api import config
from backend.tube_api.routes import router as api_router
from backend.tube_api.routes.system_routes import AVAILABLE_ENDPOINTS
from backend.tube_api.utils.helpers import error_json, utc_timestamp
from backend.tube_api.utils.rate_limiter import RateLimitMiddleware, build_rate_limiter
from backend.tube_api.utils.redis_client import RedisClient
from backend.tube_api.utils.security_headers import SecurityHeadersMiddleware

if not logging.getLogger().hasHandlers():
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
    )

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app_as: FastAPI):
    uses_redis = config.RATE_LIMIT_ENABLED and config.RATE_LIMIT_STORAGE == "redis"
    if uses_redis:
        await RedisClient.init()
        logger.info(f"✅ Rate limit counters stored in Redis at {config.REDIS_HOST}:{config.REDIS_PORT}")

    logger.info(f"🚀 {config.API_NAME} running on port {config.PORT} ({config.APP_ENV})")
    logger.info(f"📖 API Documentation: http://localhost:{config.PORT}/api")
    yield

    if uses_redis:
        await RedisClient.close()


async def not_found_or_http_error(request: Request, exc: StarletteHTTPException):
    # only unmatched routes get the endpoint catalogue; handlers build their own 404s
    if exc.status_code == 404:
        return JSONResponse(
            {
                "error": "Endpoint not found",
                "message": "The requested endpoint does not exist",
                "availableEndpoints": AVAILABLE_ENDPOINTS,
            },
            status_code=404,
        )
    return await http_exception_handler(request, exc)


async def request_validation_error(request: Request, exc: RequestValidationError):
    return error_json(
        "Invalid request",
        "Request parameters or body could not be parsed",
        status_code=400,
        details=str(exc.errors()),
    )


async def unhandled_error(request: Request, exc: Exception):
    logger.exception(f"API Error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        {
            "error": "Internal Server Error",
            "message": str(exc) if config.SHOW_ERROR_DETAILS else "Something went wrong",
            "timestamp": utc_timestamp(),
        },
        status_code=500,
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=config.API_NAME,
        version=config.API_VERSION,
        lifespan=lifespan,
    )

    if config.RATE_LIMIT_ENABLED:
        limiter = build_rate_limiter(
            config.RATE_LIMIT_STORAGE,
            config.RATE_LIMIT_WINDOW_SECONDS,
            config.RATE_LIMIT_MAX_REQUESTS,
        )
        app.add_middleware(
            RateLimitMiddleware,
            limiter=limiter,
            trust_proxy=config.TRUST_PROXY_HEADERS,
        )

    app.add_middleware(SecurityHeadersMiddleware)
    # added last so it wraps everything, including 429 responses
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, not_found_or_http_error)
    app.add_exception_handler(RequestValidationError, request_validation_error)
    app.add_exception_handler(Exception, unhandled_error)

    if os.path.isdir(config.STATIC_DIR):
        app.mount("/static", StaticFiles(directory=config.STATIC_DIR), name="static")

    app.include_router(api_router)
    return app


app = create_app()


def run():
    uvicorn.run("backend.tube_api.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
