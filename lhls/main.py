"""LHLS Faker - FastAPI Application."""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from lhls.config import Settings, settings as default_settings
from lhls.routers import lhls
from lhls.services.clock import StreamClock
from lhls.services.playlist_loader import Playlist


def create_app(
    playlist: Playlist,
    settings: Optional[Settings] = None,
    clock: Optional[StreamClock] = None,
) -> FastAPI:
    """
    Build the application around a loaded playlist.

    The stream clock starts when the app is created.
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.app_name,
        description="Simulates a low-latency live HLS stream from a VOD playlist",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.playlist = playlist
    app.state.clock = clock or StreamClock()

    # CORS middleware (players are usually hosted on another origin)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(lhls.router)

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.app_name,
            "version": "0.1.0",
            "segments": len(playlist),
            "duration": playlist.total_duration,
            "endpoints": {
                "lhls": "/lhls/manifest.m3u8 - Simulated live stream with paced segments",
                "live": "/live/ - Original playlist and segments, served as-is",
                "status": "/lhls/status - Current position in the simulated stream",
            },
        }

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    # Original playlist and segments, untouched by the stream clock
    app.mount("/live", StaticFiles(directory=playlist.base_dir), name="live")

    return app
