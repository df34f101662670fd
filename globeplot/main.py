"""
GlobePlot map API - Main FastAPI application
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

import globeplot.utils.logger  # noqa: F401  configures structlog on import
from globeplot.utils.config import settings


# Create FastAPI app
app = FastAPI(
    title="GlobePlot Map API",
    description="Map feature compilation and coordinate refresh for travel itineraries",
    version="1.0.0"
)

# CORS middleware - allow frontend to call our API
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "service": "GlobePlot Map API",
        "status": "running",
        "version": "1.0.0"
    }


@app.get("/health")
async def health_check():
    """Detailed health check"""
    return {
        "status": "healthy",
        "api": "ok",
        "geocoding": "configured" if settings.mapbox_access_token else "missing_token",
        "refresh_store": "supabase" if settings.supabase_url and settings.supabase_key else "memory",
    }


# Import and include routers
from globeplot.routes.map import router as map_router
from globeplot.routes.geocode import router as geocode_router
app.include_router(map_router)
app.include_router(geocode_router)
