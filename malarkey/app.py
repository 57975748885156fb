"""
Malarkey Markov Text Service
Main application entry point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from malarkey.config import settings
from malarkey.services.errors import MarkovError
from malarkey.utils.logger import setup_logger

# Setup logging
logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for service initialization"""
    logger.info("[BOOT] Starting Malarkey service...")
    logger.info(f"[BOOT] Default coherence: {settings.DEFAULT_COHERENCE}")
    logger.info(f"[BOOT] Chain cache size: {settings.MAX_CACHED_CHAINS}")
    logger.info("[BOOT] Malarkey service ready!")
    try:
        yield
    finally:
        from malarkey.api.routers.markov_router import MODEL_CACHE

        logger.info("[SHUTDOWN] Cleaning up...")
        MODEL_CACHE.clear()
        logger.info("[SHUTDOWN] Malarkey service stopped")


# Create FastAPI app
app = FastAPI(
    title="Malarkey",
    description="Markov chain text generator",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MarkovError)
async def markov_exception_handler(request: Request, exc: MarkovError):
    logger.error(f"[ERR] Markov error: {exc}")
    return JSONResponse(
        status_code=422,
        content={
            "ok": False,
            "error": {
                "code": "MARKOV_ERROR",
                "message": str(exc),
                "details": {"type": type(exc).__name__},
            },
        },
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"[ERR] Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "ok": False,
            "error": {
                "code": "MALARKEY_ERROR",
                "message": "Internal server error occurred",
                "details": {"type": type(exc).__name__},
            },
        },
    )


# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    from malarkey.api.routers.markov_router import MODEL_CACHE

    return {
        "ok": True,
        "data": {
            "status": "healthy",
            "version": settings.SERVICE_VERSION,
            "cached_chains": len(MODEL_CACHE),
        },
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "endpoints": {
            "health": "/health",
            "docs": "/docs",
            "markov": "/markov/*",
        },
    }


from malarkey.api.routers import markov_router  # noqa: E402

app.include_router(markov_router.router)


def run():
    import uvicorn

    uvicorn.run(
        "malarkey.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
