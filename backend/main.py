from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os
from dotenv import load_dotenv

# Load environment variables before the config class reads them
load_dotenv()

from spotpalette import __version__
from spotpalette.api.v1 import router as v1_router
from spotpalette.schemas import HealthResponse
from spotpalette.utils.logging import get_logger

logger = get_logger()

app = FastAPI(
    title="SpotPalette Backend",
    description="Spot-color palette extraction for logos, illustrations and photos",
    version=__version__
)

# Add CORS middleware with basic configuration
allowed_origins = os.environ.get("SPOTPALETTE_ALLOWED_ORIGINS", "http://localhost:3000").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Health check endpoint."""
    return HealthResponse(ok=True, version=__version__, service="spotpalette")


@app.get("/")
def root():
    return {"service": "spotpalette", "docs": "/docs", "health": "/healthz"}


logger.info("SpotPalette API ready", extra={"version": __version__})
