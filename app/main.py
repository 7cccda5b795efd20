"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from app.api.routes import auth, market, portfolio, settings as settings_routes
from app.core.database import init_db
from app.core.config import get_settings
from app.core.exceptions import TrackerError
from app.core.logging_config import setup_logging
from app.services.search import shutdown_search_debouncer

# Configure logging
setup_logging()
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Initialize database on startup and clear pending searches on shutdown."""
    logger.info("Starting application...")
    init_db()
    logger.info("Application started successfully")
    yield
    logger.info("Shutting down application...")
    shutdown_search_debouncer()
    logger.info("Application stopped")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Cryptocurrency portfolio tracker backed by CoinGecko market data",
    version=settings.app_version,
    docs_url="/docs" if settings.enable_docs else None,
    redoc_url="/redoc" if settings.enable_docs else None,
    openapi_url="/openapi.json" if settings.enable_docs else None,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError):
    """Report domain failures as a transient message for the client to show."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    """Report a failed database read or write without crashing the request."""
    logger.error(f"{request.method} {request.url.path} store failure: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Could not save your changes. Please try again."},
    )


# Include API routers
app.include_router(auth.router)
app.include_router(settings_routes.router)
app.include_router(portfolio.router)
app.include_router(market.router)


@app.get("/api")
async def api_root():
    """API root endpoint."""
    return {
        "message": f"{settings.app_name} API",
        "version": settings.app_version,
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
