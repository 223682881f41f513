# Main application file

import logging
import time
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from pos_api.database import engine, Base
from pos_api.core.config import settings
from pos_api.core.errors import PosError
from pos_api.core.rate_limiter import limiter
from pos_api.models import registry  # noqa: F401  registers every table on Base.metadata
from pos_api.routers import (
    auth,
    sales,
    invoices,
    products,
    dashboard,
)

API_VERSION = "1.0.0"


# LOGGING CONFIGURATION

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(message)s",
)

logger = logging.getLogger("pos_api")


# APP INIT

app = FastAPI(
    title="POS API",
    description="Point-of-sale backend: sales, invoices, stock and dashboard reporting",
    version=API_VERSION,
)

if settings.AUTO_CREATE_TABLES:
    Base.metadata.create_all(bind=engine)


# CORS (Token-based auth)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)


# RATE LIMITING

app.state.limiter = limiter
app.add_exception_handler(
    RateLimitExceeded,
    _rate_limit_exceeded_handler
)


# ERROR ENVELOPE

def _error(status_code: int, message: str, code: str, headers=None, **extra):
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "code": code, **extra},
        headers=headers,
    )


@app.exception_handler(PosError)
async def pos_error_handler(request: Request, exc: PosError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
    return _error(exc.status_code, exc.message, exc.code)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), "HTTP_ERROR", headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    logger.warning(f"{request.method} {request.url.path} rejected: {errors}")
    return _error(400, "Invalid request", "VALIDATION_ERROR", errors=errors)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error(500, "An unexpected error occurred", "INTERNAL_ERROR")


# REQUEST LOGGING MIDDLEWARE

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = round((time.time() - start_time) * 1000, 2)

    logger.info(
        f"{request.method} {request.url.path} "
        f"Status: {response.status_code} "
        f"Time: {duration}ms"
    )

    return response


# ROUTERS

app.include_router(auth.router)
app.include_router(sales.router)
app.include_router(invoices.router)
app.include_router(products.router)
app.include_router(dashboard.router)


# HEALTH

@app.get("/health")
def health():
    logger.info("Health check endpoint called")
    return {
        "status": "healthy",
        "message": "POS API is running",
        "timestamp": datetime.now().isoformat(),
        "version": API_VERSION,
    }
