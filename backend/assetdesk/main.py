# =============================================================================
# ASSETDESK - FASTAPI MAIN
# =============================================================================
# Application factory: lifespan, CORS, routers and error handlers.
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth.router import router as auth_router
from .config import config
from .database import init_database, get_stats
from .exceptions import AssetDeskException
from .routers import assets, companies, email_log, tickets, users

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# LIFESPAN - Startup/Shutdown
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Refuse to start without the required secrets, then prepare the schema."""
    missing = config.missing_required()
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    logger.info("%s v%s starting", config.APP_NAME, config.VERSION)
    init_database()
    stats = get_stats()
    logger.info(
        "Database ready: %d users, %d companies, %d assets, %d tickets",
        stats['users'], stats['companies'], stats['assets'], stats['tickets']
    )

    yield

    logger.info("%s stopping", config.APP_NAME)


# =============================================================================
# APP FASTAPI
# =============================================================================

app = FastAPI(
    title="AssetDesk API",
    description="IT asset register and support ticketing",
    version=config.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# ROUTERS
# =============================================================================

API_PREFIX = "/api"

app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(users.router, prefix=API_PREFIX)
app.include_router(companies.router, prefix=API_PREFIX)
app.include_router(assets.router, prefix=API_PREFIX)
app.include_router(tickets.router, prefix=API_PREFIX)
app.include_router(email_log.router, prefix=API_PREFIX)


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    return {
        "app": config.APP_NAME,
        "version": config.VERSION,
        "status": "running",
        "docs": "/docs",
        "api": API_PREFIX
    }


@app.get(f"{API_PREFIX}/health", tags=["Root"])
def health_check():
    """Health check endpoint."""
    try:
        stats = get_stats()
    except AssetDeskException as e:
        logger.error("Health check failed: %s", e.detail)
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "message": e.detail}
        )
    return {
        "status": "healthy",
        "database": "connected",
        "stats": stats
    }


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(AssetDeskException)
async def assetdesk_exception_handler(request, exc: AssetDeskException):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.to_dict())
    return JSONResponse(status_code=exc.status_code, content=exc.to_response_body())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Malformed request bodies are client errors (400, not 422)."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"Invalid request: {field} {first.get('msg', '')}".strip()
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})
