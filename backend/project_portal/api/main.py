from fastapi import FastAPI, Depends, Request, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
import logging
from sqlalchemy.orm import Session

from ..config import ALLOWED_ORIGINS, LOG_LEVEL
from ..database.connection import DatabaseManager, get_db
from .routes import auth, projects

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

# Initialize FastAPI app with metadata
app = FastAPI(
    title="Project Portal API",
    description="Multi-tenant project management API with client-scoped projects and role-based access.",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {
            "name": "Authentication",
            "description": "User registration, login and current-user lookup"
        },
        {
            "name": "Projects",
            "description": "Client-scoped project management and membership"
        }
    ]
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize database and perform startup tasks."""
    logger.info("Starting up Project Portal API...")

    try:
        DatabaseManager.init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Perform cleanup tasks on shutdown."""
    logger.info("Shutting down Project Portal API...")


# Health check endpoint
@app.get("/", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns basic API status and version information.
    """
    return {
        "message": "Project Portal API is healthy",
        "version": API_VERSION,
        "status": "operational"
    }


@app.get("/health", tags=["Health"])
def detailed_health_check(db: Session = Depends(get_db)):
    """
    Detailed health check endpoint.

    Returns health status including database connectivity.
    """
    try:
        healthy = DatabaseManager.ping(db)
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        healthy = False

    if not healthy:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unhealthy - database connection failed"
        )

    return {
        "status": "healthy",
        "version": API_VERSION,
        "database": "connected",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(projects.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "project_portal.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
