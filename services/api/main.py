"""
Customer Sheet Proxy - Backend API
FastAPI proxy exposing CRUD over the rows of one Google Sheets tab.

Install dependencies:
pip install -e ".[test]"

Run server:
uvicorn main:app --host 0.0.0.0 --port 3000
"""

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import contextvars
import logging
import os
import time
import uuid

from adapters.base import RecordStore
from core.errors import ConfigurationError
from dependencies import get_store
from routers import customers as customers_router
from settings import get_settings

# ========== Request Context for Tracing ==========
request_id_var = contextvars.ContextVar('request_id', default=None)

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

VERSION = "1.0"
ALLOWED_ORIGINS = settings.get_origins_list()

# ============================================================================
# FASTAPI APP
# ============================================================================

app = FastAPI(
    title="Customer Sheet Proxy",
    description="CRUD over spreadsheet rows, keyed by the header row",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.middleware("http")
async def request_tracing_middleware(request: Request, call_next):
    """Add request_id and timing to all requests."""
    request_id = str(uuid.uuid4())[:8]
    request_id_var.set(request_id)
    started = time.time()

    response = await call_next(request)

    latency_ms = round((time.time() - started) * 1000, 2)
    logger.info(
        f"[{request_id}] {request.method} {request.url.path} -> {response.status_code} ({latency_ms} ms)"
    )
    response.headers["X-Request-ID"] = request_id
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Spreadsheet client is not configured: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Spreadsheet client is not configured", "details": str(exc)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )

# ============================================================================
# ENDPOINTS
# ============================================================================


@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "message": "Customer Sheet Proxy",
        "version": VERSION,
        "variant": settings.deployment_variant,
        "status": "running",
        "docs": "/docs"
    }


@app.get("/healthz")
async def healthz():
    """
    Liveness probe.
    Returns 200 as long as the process is serving requests.
    """
    return {"status": "ok", "timestamp": time.time(), "version": VERSION}


@app.get("/readyz")
def readyz(store: RecordStore = Depends(get_store)):
    """
    Readiness probe.
    Ready once the header row can be read.
    """
    try:
        header = store.read_header()
        return {
            "status": "ready",
            "sheet": settings.sheet_name,
            "columns": len(header),
            "timestamp": time.time(),
        }
    except Exception as e:
        logger.error(f"Readiness check failed: {str(e)}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "error": str(e), "timestamp": time.time()}
        )


app.include_router(customers_router.router)


@app.on_event("startup")
async def startup_event():
    logger.info("Customer Sheet Proxy starting up...")
    logger.info(f"Using Spreadsheet ID: {settings.spreadsheet_id}")
    logger.info(f"Using Sheet Name: {settings.sheet_name}")
    logger.info(f"Deployment variant: {settings.deployment_variant}")
    logger.info(f"Custom data will be handled in column: '{settings.custom_data_column}'")
    logger.info(f"Allowed origins: {ALLOWED_ORIGINS}")


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", settings.port))
    uvicorn.run("main:app", host="0.0.0.0", port=port)
