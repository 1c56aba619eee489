"""Process-local catalog storage ({game_id: Game})."""
import threading
from typing import Dict, Iterable, List, Optional

from ..models import Game
from .base import GameRepository


class InMemoryGameRepository(GameRepository):
    """Keeps games in an insertion-ordered dict guarded by a lock.

    Every operation, reads included, runs under ``self._lock`` so a reader
    never sees the dict in the middle of an insert, replace or removal.
    Stored instances never leave the repository; callers get copies.
    """

    def __init__(self, seed: Optional[Iterable[Game]] = None) -> None:
        super().__init__()
        self._games: Dict[str, Game] = {}
        self._lock = threading.Lock()
        for draft in seed or ():
            self.create(draft)

    def list_all(self) -> List[Game]:
        with self._lock:
            return [game.copy() for game in self._games.values()]

    def get_by_id(self, game_id: str) -> Optional[Game]:
        with self._lock:
            game = self._games.get(str(game_id))
            return game.copy() if game else None

    def create(self, draft: Game) -> Game:
        stored = Game(draft.title, draft.platform, draft.status,
                      id=self._new_id(), created_at=self._now())
        with self._lock:
            self._games[stored.id] = stored
        self._log.info("Created game %s (%s)", stored.id, stored.title)
        return stored.copy()

    def update(self, game: Game) -> bool:
        key = str(game.id)
        with self._lock:
            existing = self._games.get(key)
            if existing is None:
                self._log.debug("Update skipped, game %s not found", key)
                return False
            # Swap in a new instance rather than mutating the stored one.
            self._games[key] = Game(game.title, game.platform, game.status,
                                    id=existing.id, created_at=existing.created_at)
        self._log.info("Updated game %s", key)
        return True

    def delete(self, game_id: str) -> bool:
        key = str(game_id)
        with self._lock:
            removed = self._games.pop(key, None)
        if removed is None:
            self._log.debug("Delete skipped, game %s not found", key)
            return False
        self._log.info("Deleted game %s", key)
        return True

    def count(self) -> int:
        with self._lock:
            return len(self._games)
