"""
Board router - kafelki, ruchy i ścieżki (tylko odczyt).
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse
from typing import Any, Dict, List

from ...board.tile import FogState, Tile
from ...core.hex_coord import HexCoord
from ..session import get_game


router = APIRouter()


def _tile_view(tile: Tile) -> Dict[str, Any]:
    """Ukryte pola zdradzają tylko pozycję."""
    if tile.fog == FogState.HIDDEN:
        return {"q": tile.coord.q, "r": tile.coord.r, "fog": tile.fog.value}
    return tile.to_dict()


@router.get("/board/tiles")
async def get_tiles() -> List[Dict[str, Any]]:
    """Wszystkie pola z uwzględnieniem mgły."""
    return [_tile_view(tile) for tile in get_game().board.all_tiles()]


@router.get("/board/tiles/{q}/{r}")
async def get_tile(q: int, r: int) -> Dict[str, Any]:
    tile = get_game().get_tile(HexCoord(q, r))
    if tile is None:
        raise HTTPException(status_code=404, detail=f"No tile at ({q}, {r})")
    return _tile_view(tile)


@router.get("/board/valid-moves")
async def get_valid_moves() -> List[Dict[str, int]]:
    """Pola dostępne z aktualnej pozycji gracza."""
    return [coord.to_dict() for coord in get_game().valid_moves()]


@router.get("/board/path/{q}/{r}")
async def get_path(q: int, r: int) -> Dict[str, Any]:
    """Najkrótsza ścieżka od gracza do (q, r)."""
    game = get_game()
    start = game.state.player.position
    path = game.shortest_path(start, HexCoord(q, r))
    if path is None:
        raise HTTPException(status_code=404, detail="No path")
    return {"path": [coord.to_dict() for coord in path], "length": len(path) - 1}


@router.get("/board/range/{q}/{r}")
async def get_range(q: int, r: int, radius: int = 1) -> List[Dict[str, int]]:
    return [coord.to_dict() for coord in get_game().hexes_in_range(HexCoord(q, r), radius)]


@router.get("/board/map", response_class=PlainTextResponse)
async def get_map() -> str:
    """Mapa ASCII (debug)."""
    game = get_game()
    return game.board.debug_print(game.state.player.position)
