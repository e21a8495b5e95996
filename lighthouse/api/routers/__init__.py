"""Routery API: game, board, saves."""
