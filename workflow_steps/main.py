"""FastAPI application entry point."""
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workflow_steps.api import analyze
from workflow_steps.config import get_settings
from workflow_steps.logging_setup import configure_logging

settings = get_settings()

configure_logging(settings)

logger = structlog.get_logger()

app = FastAPI(
    title=settings.app_name,
    description="Step-by-step analysis of n8n workflow documents",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware for the marketplace frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analyze.router, prefix="/api", tags=["analysis"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": "0.1.0",
        "max_iteration_factor": settings.max_iteration_factor,
    }


@app.on_event("startup")
async def startup_event():
    """Application startup handler."""
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        debug=settings.debug,
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown handler."""
    logger.info("application_shutdown")
