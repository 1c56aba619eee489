"""Services package: expose the catalog service and its helpers from one import."""
from .game_service import (
    GameService, Outcome, game_location,
    FOUND, NOT_FOUND, CREATED, CLIENT_ERROR, SUCCESS, SUCCESS_NO_CONTENT,
)
from .validation import validate_game_payload

__all__ = [
    'GameService',
    'Outcome',
    'game_location',
    'validate_game_payload',
    'FOUND',
    'NOT_FOUND',
    'CREATED',
    'CLIENT_ERROR',
    'SUCCESS',
    'SUCCESS_NO_CONTENT',
]
