"""Maps catalog requests onto the repository and tags the results."""
import logging
from typing import Any, Dict, Optional

from ..models import Game
from ..repositories.base import GameRepository
from .validation import validate_game_payload

FOUND = 'found'
NOT_FOUND = 'not_found'
CREATED = 'created'
CLIENT_ERROR = 'client_error'
SUCCESS = 'success'
SUCCESS_NO_CONTENT = 'success_no_content'

_STATUS_CODES = {
    FOUND: 200,
    NOT_FOUND: 404,
    CREATED: 201,
    CLIENT_ERROR: 400,
    SUCCESS: 200,
    SUCCESS_NO_CONTENT: 204,
}

GAMES_PATH = '/api/games'


class Outcome:
    """Transport-neutral result of a catalog request.

    ``kind`` is one of the module-level tags (``FOUND``, ``NOT_FOUND`` ...).
    ``body`` is a :class:`Game`, a list of games, an error dict or ``None``.
    ``location`` is set for ``CREATED`` only.
    """

    __slots__ = ('kind', 'body', 'location')

    def __init__(self, kind: str, body: Any = None,
                 location: Optional[str] = None) -> None:
        self.kind = kind
        self.body = body
        self.location = location

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]

    def __repr__(self) -> str:
        return f"Outcome({self.kind!r}, body={self.body!r}, location={self.location!r})"


def game_location(game_id: str) -> str:
    """Return the path a created game can be read back from."""
    return f"{GAMES_PATH}/{game_id}"


class GameService:
    """Validates requests and translates repository results into outcomes,
    delegating persistence to a :class:`~catalog.repositories.base.GameRepository`.

    The service never picks a backend itself; whichever repository it is
    given is used as-is.  Validation always happens before the repository is
    touched, so a rejected request leaves the store unchanged.
    """

    def __init__(self, repository: GameRepository) -> None:
        self._repo = repository
        self._log = logging.getLogger('catalog.service')

    @property
    def repository(self) -> GameRepository:
        return self._repo

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_games(self) -> Outcome:
        return Outcome(FOUND, self._repo.list_all())

    def get_game(self, game_id: str) -> Outcome:
        game = self._repo.get_by_id(game_id)
        if game is None:
            return Outcome(NOT_FOUND)
        return Outcome(FOUND, game)

    def create_game(self, payload: Any) -> Outcome:
        """Validate *payload* and store it as a new game.

        Any ``id`` in the payload is ignored; the repository assigns one.
        """
        errors = validate_game_payload(payload)
        if errors:
            self._log.info("Rejected create: %s", errors)
            return _validation_failure(errors)

        draft = Game.from_dict({**payload, 'id': None, 'created_at': None})
        stored = self._repo.create(draft)
        return Outcome(CREATED, stored, location=game_location(stored.id))

    def update_game(self, game_id: str, payload: Any) -> Outcome:
        """Replace the mutable fields of the game addressed by *game_id*.

        A payload ``id`` is optional, but when present it must equal
        *game_id*.
        """
        errors = validate_game_payload(payload)
        if errors:
            self._log.info("Rejected update of %s: %s", game_id, errors)
            return _validation_failure(errors)

        body_id = payload.get('id')
        if body_id is not None and str(body_id) != str(game_id):
            self._log.info("Rejected update of %s: body declares id %s", game_id, body_id)
            return Outcome(CLIENT_ERROR, {
                'error': 'ID mismatch between URL and request body.',
                'errors': {'id': ['The id in the body must match the id in the URL.']},
            })

        game = Game.from_dict({**payload, 'id': str(game_id), 'created_at': None})
        if not self._repo.update(game):
            return Outcome(NOT_FOUND)

        # Re-read so the response carries the stored created_at; fall back to
        # the submitted values if the game was deleted in between.
        stored = self._repo.get_by_id(game.id) or game
        return Outcome(SUCCESS, stored)

    def delete_game(self, game_id: str) -> Outcome:
        if not self._repo.delete(game_id):
            return Outcome(NOT_FOUND)
        return Outcome(SUCCESS_NO_CONTENT)


def _validation_failure(errors: Dict) -> Outcome:
    return Outcome(CLIENT_ERROR, {'error': 'Validation failed', 'errors': errors})
