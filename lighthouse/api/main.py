"""
FastAPI Backend dla klienta The Last Lighthouse.

Endpoints:
    GET  /api/game              - stan partii
    POST /api/game/move         - ruch gracza
    POST /api/game/choose       - wybór przy zmierzchu
    POST /api/game/acknowledge  - czekaj na świt
    POST /api/game/advance      - przesuń zegar pauz
    GET  /api/board/tiles       - pola wyspy (z mgłą)
    GET  /api/board/path/{q}/{r}
    GET  /api/saves             - sloty zapisu

    GET  /api/health
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from .routers import board, game, saves


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown events."""
    logger.info("Last Lighthouse API starting...")
    yield
    logger.info("Last Lighthouse API shutting down...")


app = FastAPI(
    title="The Last Lighthouse API",
    description="Backend API for The Last Lighthouse simulation core",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS - allow all origins (including file://)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(game.router, prefix="/api", tags=["Game"])
app.include_router(board.router, prefix="/api", tags=["Board"])
app.include_router(saves.router, prefix="/api", tags=["Saves"])


@app.get("/api/health")
async def health():
    """API health check."""
    return {"status": "healthy"}
