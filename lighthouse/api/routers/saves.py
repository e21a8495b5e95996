"""
Saves router - sloty zapisu.
"""

from fastapi import APIRouter, HTTPException
from typing import Any, Dict, List

from ..session import get_game


router = APIRouter()


@router.get("/saves")
async def list_saves() -> List[Dict[str, Any]]:
    return get_game().saves.list_slots()


@router.post("/saves/continue")
async def continue_game() -> Dict[str, Any]:
    """Autosave, a gdy go brak lub jest uszkodzony - pierwszy slot ręczny."""
    game = get_game()
    if not game.continue_game():
        raise HTTPException(status_code=404, detail="No save to continue")
    return game.summary()


@router.post("/saves/{slot}")
async def save(slot: str) -> Dict[str, Any]:
    game = get_game()
    if not game.save(slot):
        raise HTTPException(status_code=400, detail=f"Could not save to {slot}")
    return {"slot": slot, "info": game.saves.get_slot_info(slot)}


@router.post("/saves/{slot}/load")
async def load(slot: str) -> Dict[str, Any]:
    """Wczytuje slot; przy błędzie stan partii zostaje bez zmian."""
    game = get_game()
    if not game.load(slot):
        raise HTTPException(status_code=404, detail=f"No loadable save in {slot}")
    return game.summary()


@router.delete("/saves/{slot}")
async def delete(slot: str) -> Dict[str, Any]:
    if not get_game().saves.delete_save(slot):
        raise HTTPException(status_code=500, detail=f"Could not delete {slot}")
    return {"slot": slot, "deleted": True}
