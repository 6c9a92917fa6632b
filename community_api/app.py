"""
FastAPI application entry point
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from loguru import logger
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from community_api.config import settings
from community_api.api import api_v1_router
from community_api.cache import init_redis, close_redis, get_redis_client
from community_api.db import base as db_base
from community_api.db.base import init_db, close_db, create_tables
from community_api.models.response import ErrorDetail, ErrorMeta, ErrorResponse
from community_api.utils.exceptions import ServiceError
from community_api.utils.logger_config import setup_logging
from community_api.utils.ratelimit import rate_limiter


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    setup_logging()
    logger.info(f"🚀 Starting {settings.APP_NAME}...")

    # Redis
    try:
        await init_redis()
        logger.success("✅ Redis initialized")
    except Exception as e:
        logger.error(f"❌ Redis init failed, catalog cache and rate limit run locally: {e}")

    # Database
    await init_db()
    await create_tables()
    logger.success("✅ Database connection pool initialized")

    logger.success("🎉 Application started successfully!")

    yield

    logger.info("👋 Shutting down...")

    try:
        await close_db()
        logger.info("✅ Database connections closed")
    except Exception as e:
        logger.error(f"❌ Database close failed: {e}")

    try:
        await close_redis()
    except Exception as e:
        logger.error(f"❌ Redis close failed: {e}")

    logger.success("✅ Application shutdown complete")


# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)


def error_response(request: Request, status_code: int, code: str, message: str, headers: dict = None) -> JSONResponse:
    """Render the error envelope"""
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message, statusCode=status_code),
        meta=ErrorMeta(path=request.url.path),
    )
    return JSONResponse(status_code=status_code, headers=headers, content=body.model_dump())


# Rate limiting (added before CORS so that CORS wraps it)
@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    """Fixed window limit per client IP"""
    client_id = request.client.host if request.client else "unknown"
    allowed, retry_after = await rate_limiter.hit(client_id)
    if not allowed:
        logger.warning(f"⚠️ Rate limit exceeded for {client_id} on {request.url.path}")
        return error_response(
            request, 429, "RATE_LIMIT", "Too many requests, please try again later",
            headers={"Retry-After": str(retry_after)}
        )
    return await call_next(request)


# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Retry-After"],
)

# Register API routes
app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root():
    """Liveness check"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "ok"
    }


@app.get("/health")
async def health_check():
    """Detailed health check"""
    health_status = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "services": {}
    }

    # Redis
    try:
        redis_client = get_redis_client()
        if redis_client:
            await redis_client.ping()
            health_status["services"]["redis"] = "healthy"
        else:
            health_status["services"]["redis"] = "not_initialized"
    except Exception as e:
        logger.warning(f"⚠️ Redis health check failed: {e}")
        health_status["services"]["redis"] = "unhealthy"
        health_status["status"] = "degraded"

    # Database
    try:
        if db_base.async_engine:
            async with db_base.async_engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            health_status["services"]["database"] = "healthy"
        else:
            health_status["services"]["database"] = "not_initialized"
    except Exception as e:
        logger.warning(f"⚠️ Database health check failed: {e}")
        health_status["services"]["database"] = "unhealthy"
        health_status["status"] = "degraded"

    return health_status


# ==================== Exception handlers ====================

@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Expected business errors"""
    if exc.status_code >= 500:
        logger.error(f"❌ {exc.code} on {request.url.path}: {exc.message}")
    else:
        logger.debug(f"{exc.code} on {request.url.path}: {exc.message}")
    return error_response(request, exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed body, unknown fields or out-of-range parameters"""
    errors = jsonable_encoder(exc.errors())
    message = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', []))}: {err.get('msg')}" for err in errors
    ) or "Validation failed"
    return error_response(request, 400, "VALIDATION_ERROR", message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    codes = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
    }
    return error_response(
        request, exc.status_code, codes.get(exc.status_code, "HTTP_ERROR"), str(exc.detail),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Unhandled errors: full traceback in the logs, generic message to the client"""
    logger.opt(exception=exc).error(f"Unhandled exception: {type(exc).__name__}: {str(exc)}")
    return error_response(request, 500, "INTERNAL_SERVER_ERROR", "Internal server error")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "community_api.app:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG
    )
