"""
FastAPI application for the Game Survey backend
"""

import os
import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gamesurvey.api.actions import router as actions_router
from gamesurvey.api.admin import router as admin_router
from gamesurvey.config import settings
from gamesurvey.errors import SurveyAPIError
from gamesurvey.utils.logger import LogLevel, get_logger, setup_logging

# Get log level from environment variable, default to INFO
log_level_raw = os.getenv("LOG_LEVEL", "INFO").upper()
log_level: LogLevel = log_level_raw if log_level_raw in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] else "INFO"  # type: ignore
log_file = os.getenv("LOG_FILE")  # Optional log file

setup_logging(level=log_level, log_file=log_file, include_timestamp=True)

logger = get_logger(__name__)

app = FastAPI(
    title="Game Survey API",
    description="Pre/post-game sentiment surveys, sessions and analytics",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

logger.info("FastAPI application initialized")
logger.info(f"Log level: {log_level}")
logger.info(f"Database: {settings.database_path}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Dashboard and game clients call from anywhere
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next: Callable) -> Response:
    """Log every request with a short correlation id and its duration"""
    request_id = str(uuid.uuid4())[:8]
    start_time = time.time()

    logger.info(
        f"[API] Request started: {request.method} {request.url.path}",
        extra={
            "component": "API",
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params) if request.query_params else None,
        },
    )

    try:
        response = await call_next(request)
    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        logger.error(
            f"[API] Request failed: {request.method} {request.url.path} -> ERROR ({duration_ms:.2f}ms): {str(e)}",
            extra={"component": "API", "request_id": request_id, "error_type": type(e).__name__},
            exc_info=True,
        )
        raise

    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        f"[API] Request completed: {request.method} {request.url.path} -> {response.status_code} ({duration_ms:.2f}ms)",
        extra={
            "component": "API",
            "request_id": request_id,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


@app.exception_handler(SurveyAPIError)
async def survey_error_handler(request: Request, exc: SurveyAPIError) -> JSONResponse:
    """Render API errors in the {success, error} envelope"""
    if exc.status_code >= 500:
        logger.error(f"[API] {request.url.path}: {exc.message}")
    else:
        logger.warning(f"[API] {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"[API] Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(exc)},
    )


app.include_router(actions_router, prefix="/exec", tags=["actions"])
app.include_router(admin_router, prefix="/admin", tags=["admin"])


@app.on_event("startup")
async def startup_event():
    """Make sure the workbook sheets exist"""
    from gamesurvey.api.store import get_repository

    logger.info("=" * 60)
    logger.info("APPLICATION STARTUP")
    sheets = get_repository().setup_sheets()
    logger.info(f"✓ Sheets ready: {', '.join(sheets)}")
    logger.info("=" * 60)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Game Survey API",
        "version": "1.0.0",
        "status": "running",
        "log_level": log_level,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on {settings.host}:{settings.port}")
    uvicorn.run(
        "gamesurvey.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=log_level.lower(),
    )
