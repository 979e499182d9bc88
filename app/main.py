"""Bible Study FastAPI Application."""
from datetime import datetime
import logging

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.database import initialize_connection_pool, close_connection_pool
from app.models.schemas import HealthCheck
from app.utils.exceptions import DatabaseError
from app.routers import bookmarks, highlights, notes, progress, reading_plans, topics, user_data
from app.middleware.request_logging import RequestLoggingMiddleware

# Get settings
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Log CORS configuration for debugging
logger.info(f"CORS allowed origins: {settings.allowed_origins}")
# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Bible study API: reading plans, annotations, progress and topics",
    version="1.0.0"
)

app.add_middleware(RequestLoggingMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Initialize resources on application startup."""
    logger.info("Initializing application resources...")
    try:
        initialize_connection_pool(minconn=settings.db_pool_min, maxconn=settings.db_pool_max)
        logger.info("Application startup complete")
    except Exception as e:
        logger.error(f"Failed to initialize application: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources on application shutdown."""
    logger.info("Shutting down application...")
    try:
        close_connection_pool()
        logger.info("Application shutdown complete")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


# Include routers
app.include_router(reading_plans.router)
app.include_router(bookmarks.router)
app.include_router(highlights.router)
app.include_router(notes.router)
app.include_router(progress.router)
app.include_router(topics.router)
app.include_router(user_data.router)


@app.get("/", response_model=HealthCheck)
async def health_check():
    """Health check endpoint."""
    return HealthCheck(
        status="healthy",
        timestamp=datetime.utcnow()
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request, exc):
    """Malformed requests are reported as 400 Bad Request."""
    logger.info(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(DatabaseError)
async def database_error_handler(request, exc):
    logger.error(f"Database error: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )
