"""SQLAlchemy-backed catalog storage (the ``games`` table)."""
import datetime
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from database import GameRecord
from ..models import Game
from .base import GameRepository, StorageError


class SqlGameRepository(GameRepository):
    """Persists games through a SQLAlchemy session factory.

    Each public method is one transaction: it opens its own session, commits
    at most once and closes the session before returning.  Any
    ``SQLAlchemyError`` is rolled back and re-raised as :class:`StorageError`.
    """

    def __init__(self, session_factory) -> None:
        """
        Args:
            session_factory: A ``sessionmaker`` (or any zero-argument callable
                returning a session), see ``database.make_session_factory``.
        """
        super().__init__()
        self._session_factory = session_factory

    @contextmanager
    def _transaction(self, operation: str) -> Iterator:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as exc:
            self._log.error("Storage error during %s: %s", operation, exc)
            db.rollback()
            raise StorageError(f"{operation} failed: {exc}") from exc
        finally:
            db.close()

    @staticmethod
    def _to_game(record: GameRecord) -> Game:
        created_at = record.created_at
        # SQLite hands back naive datetimes; values are always stored as UTC.
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=datetime.timezone.utc)
        return Game(record.title, record.platform, record.status,
                    id=record.id, created_at=created_at)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def list_all(self) -> List[Game]:
        with self._transaction('list_all') as db:
            records = db.query(GameRecord).order_by(
                GameRecord.created_at, GameRecord.id).all()
            return [self._to_game(r) for r in records]

    def get_by_id(self, game_id: str) -> Optional[Game]:
        with self._transaction('get_by_id') as db:
            record = db.get(GameRecord, str(game_id))
            return self._to_game(record) if record else None

    def create(self, draft: Game) -> Game:
        record = GameRecord(
            id=self._new_id(),
            title=draft.title,
            platform=draft.platform,
            status=draft.status,
            created_at=self._now(),
        )
        stored = self._to_game(record)
        with self._transaction('create') as db:
            db.add(record)
        self._log.info("Created game %s (%s)", stored.id, stored.title)
        return stored

    def update(self, game: Game) -> bool:
        key = str(game.id)
        with self._transaction('update') as db:
            record = db.get(GameRecord, key)
            if record is None:
                self._log.debug("Update skipped, game %s not found", key)
                return False
            record.title = game.title
            record.platform = game.platform
            record.status = game.status
        self._log.info("Updated game %s", key)
        return True

    def delete(self, game_id: str) -> bool:
        key = str(game_id)
        with self._transaction('delete') as db:
            record = db.get(GameRecord, key)
            if record is None:
                self._log.debug("Delete skipped, game %s not found", key)
                return False
            db.delete(record)
        self._log.info("Deleted game %s", key)
        return True

    def count(self) -> int:
        with self._transaction('count') as db:
            return db.query(GameRecord).count()
