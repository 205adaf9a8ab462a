"""
Rix Project Generator - FastAPI Backend
Main application entry point
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn
import logging

from config import get_settings
from routes import auth, projects, dashboard

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    logger.info("Starting Rix API...")
    if not get_settings().supabase_configured:
        logger.warning("Supabase credentials are not set; running in demo mode")

    yield

    # Shutdown
    dashboard.registry.clear()
    logger.info("Shutting down Rix API...")


# Initialize FastAPI app
app = FastAPI(
    title="Rix API",
    description="Software and hardware project generator",
    version="1.0.0",
    lifespan=lifespan
)

settings = get_settings()

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check
@app.get("/")
async def root():
    """API health check"""
    return {
        "status": "healthy",
        "service": "Rix API",
        "version": "1.0.0"
    }


@app.get("/api/health")
async def health_check():
    """Detailed health check"""
    current = get_settings()
    return {
        "status": "healthy",
        "supabase_configured": current.supabase_configured,
        "projects_table": current.projects_table,
        "assets_bucket": current.assets_bucket,
        "image_api": current.image_api_base_url,
    }


app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(dashboard.router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        reload=settings.python_env == "development",
        log_level="info"
    )
