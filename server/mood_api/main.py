"""Mood Tracker Analysis API - FastAPI application entry point."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import database
from .config import get_settings
from .routes import analysis, mood

settings = get_settings()

app = FastAPI(
    title="Mood Tracker Analysis API",
    description="Read-only API for mood pattern analysis and dashboard statistics",
    version="1.0.0",
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Include routers
app.include_router(mood.router)
app.include_router(analysis.router)


@app.get("/health")
async def health_check():
    """Health check endpoint for the API."""
    db_status = "available" if database.db_manager.is_available() else "unavailable"
    return {"status": "healthy", "service": "mood-analysis-api", "database": db_status}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server.mood_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
