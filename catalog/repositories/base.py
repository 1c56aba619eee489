"""Repository contract shared by every catalog storage backend."""
import datetime
import logging
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import Game


class StorageError(Exception):
    """The backing store is unreachable or rejected an operation.

    Raised only by durable backends.  "Not found" is never a storage error.
    """


class GameRepository(ABC):
    """CRUD contract for catalog entries.

    Implementations must be indistinguishable to a caller:

    * ``get_by_id`` returns ``None`` for an unknown id, it never raises.
    * ``create`` always assigns a fresh id, ignoring any id on the draft.
    * ``update`` and ``delete`` return ``False`` when the id is unknown and
      leave the store untouched.
    * Returned games are detached copies; mutating one never changes the
      store.
    """

    def __init__(self) -> None:
        self._log = logging.getLogger(f'catalog.repository.{type(self).__name__}')

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _now() -> datetime.datetime:
        return datetime.datetime.now(datetime.timezone.utc)

    @abstractmethod
    def list_all(self) -> List[Game]:
        """Return every stored game (an empty list when the store is empty)."""
        pass

    @abstractmethod
    def get_by_id(self, game_id: str) -> Optional[Game]:
        """Return the game stored under *game_id*, or ``None``."""
        pass

    @abstractmethod
    def create(self, draft: Game) -> Game:
        """Store *draft* under a freshly generated id and return the stored game."""
        pass

    @abstractmethod
    def update(self, game: Game) -> bool:
        """Replace title, platform and status of the game with ``game.id``.

        Returns:
            ``True`` if the game existed and was updated; ``False`` otherwise.
        """
        pass

    @abstractmethod
    def delete(self, game_id: str) -> bool:
        """Remove the game.  Returns ``True`` if it existed."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored games."""
        pass
