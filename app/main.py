"""
MKWorld Overlay - Main FastAPI Application
Player ranking data fetched live from the MK Central Lounge, cached briefly
"""
import logging
from typing import Optional

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from app.errors import PlayerValidationError, UpstreamError, register_error_handlers
from app.players import PlayerService, close_player_service, get_player_service
from app.schemas import ErrorResponse, PlayerRecord
from app.utils.helpers import is_valid_player_name, safe_strip
from config.settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("main")

# Version tracking
APP_VERSION = "v1.0.0"
APP_NAME = "MKWorld Overlay"

NAME_REQUIRED = "Player name is required"
NAME_INVALID = "Player name can only contain letters, numbers, spaces, and hyphens"

app = FastAPI(
    title=APP_NAME,
    description="Live Mario Kart World Lounge ranking data for stream overlays",
    version=APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.on_event("shutdown")
def _close_upstream_session() -> None:
    close_player_service()


@app.get("/health", response_class=PlainTextResponse)
def health_check():
    """Health check endpoint."""
    return "OK"


@app.get("/cache/stats")
def cache_stats(service: PlayerService = Depends(get_player_service)):
    """Get cache statistics."""
    return service.get_stats()


# ===== PLAYERS =====

@app.get(
    "/api/player/details",
    response_model=PlayerRecord,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def get_player_details(
    name: Optional[str] = Query(None, description="Lounge player name"),
    game: Optional[str] = Query(None, description="'12p' for the 12-player ladder, omit for 24p"),
    service: PlayerService = Depends(get_player_service),
):
    """
    Get a player's Lounge ranking record.

    Served from cache for up to a minute, otherwise fetched from the Lounge.
    """
    player_name = safe_strip(name)
    if not player_name:
        raise PlayerValidationError(NAME_REQUIRED)
    if not is_valid_player_name(player_name):
        raise PlayerValidationError(NAME_INVALID)

    try:
        return service.get_player(player_name, game)
    except UpstreamError as e:
        logger.error(f"Failed to fetch player data for {player_name!r}: {e}")
        raise


# ===== STATIC / FRONTEND =====

if settings.static_directory.is_dir():
    app.mount("/static", StaticFiles(directory=settings.static_directory), name="static")

_assets_directory = settings.dist_directory / "assets"
if _assets_directory.is_dir():
    app.mount("/assets", StaticFiles(directory=_assets_directory), name="assets")


def _index_file():
    """Built SPA index first, then a plain index.html in the working directory."""
    for candidate in (settings.dist_directory / "index.html", settings.static_directory.parent / "index.html"):
        if candidate.is_file():
            return candidate
    return None


@app.get("/{full_path:path}", include_in_schema=False)
def spa_fallback(full_path: str):
    """Serve the overlay frontend for every non-API path."""
    index = _index_file()
    if full_path.startswith("api/") or index is None:
        return JSONResponse({"error": "Not found"}, status_code=404)
    return FileResponse(index)


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on 0.0.0.0:{settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
