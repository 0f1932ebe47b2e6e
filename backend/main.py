import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum
from api.routes import router as api_router
from config.settings import get_settings

settings = get_settings()
logging.getLogger().setLevel(settings.LOG_LEVEL)

app = FastAPI(
    title="Design Jobs Sync API",
    description="Scheduled ingestion of remote design jobs into the jobs table",
    version="1.0.0",
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(api_router, prefix="/api", tags=["API"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    }


# Lambda handler
handler = Mangum(app, lifespan="off")
