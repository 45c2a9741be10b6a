import logging
import os
import uuid

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import APP_NAME, APP_VERSION, get_cors_origins, get_log_level
from core.api import install_exception_handlers
from core.startup import FootprintRuntime
from db import db_manager
from traces import router as traces_router

# Basic logging configuration
logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

runtime = FootprintRuntime()

app = FastAPI(title=APP_NAME, version=APP_VERSION)

origins = get_cors_origins()
if origins:
    logger.info("CORS configured with specific origins: %s", origins)
else:
    # Development fallback - allow localhost and common dev ports
    origins = [
        "http://localhost:3000",
        "http://localhost:8080",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8080",
    ]
    logger.warning(
        "CORS_ALLOWED_ORIGINS not set. Using development defaults: %s",
        origins,
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(traces_router)
install_exception_handlers(app)


# --- Application Lifecycle Events ---
@app.on_event("startup")
async def startup_event():
    """Initialize Beanie and the MongoDB log handler."""
    try:
        await runtime.start()
        if runtime.log_handler is not None:
            logger.info("MongoDB logging handler initialized and configured.")
        logger.info("Application startup completed successfully.")
    except Exception as e:
        logger.critical(
            "CRITICAL: Failed to initialize application during startup: %s",
            str(e),
            exc_info=True,
        )
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources when shutting down."""
    await runtime.stop()
    logger.info("Application shutdown completed successfully")


@app.get("/health", tags=["health"])
async def health_check():
    """Liveness check with a database reachability flag."""
    database_ok = await db_manager.ping()
    return {
        "status": "ok",
        "version": APP_VERSION,
        "database": "ok" if database_ok else "unavailable",
    }


# --- Global Exception Handlers ---
@app.exception_handler(500)
async def internal_error_handler(request: Request, exc: Exception):
    """Handle 500 Internal Server Error errors."""
    error_id = str(uuid.uuid4())
    logger.error(
        "Internal Server Error (ID: %s): Request %s %s failed. Exception: %s",
        error_id,
        request.method,
        request.url,
        str(exc),
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "error_id": error_id,
            "detail": str(exc),
        },
    )


# --- Main Execution Block ---
if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8080"))
    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=port,
        log_level="info",
        reload=True,
    )
