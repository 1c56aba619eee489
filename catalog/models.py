"""Catalog entry model and the allowed values for its classification fields."""
import datetime
from typing import Any, Dict, Optional

TITLE_MAX_LENGTH = 100

PLATFORMS = ('PC', 'PS5', 'XboxSeries', 'Switch', 'Mobile')
STATUSES = ('Backlog', 'Playing', 'Completed', 'Dropped')


class Game:
    """A single entry in the personal game catalog.

    ``id`` and ``created_at`` are assigned by the repository on creation.  A
    game built from client input (a *draft*) carries ``id=None`` until it has
    been stored.
    """

    __slots__ = ('id', 'title', 'platform', 'status', 'created_at')

    def __init__(self, title: str, platform: str, status: str,
                 id: Optional[str] = None,
                 created_at: Optional[datetime.datetime] = None) -> None:
        self.id = id
        self.title = title
        self.platform = platform
        self.status = status
        self.created_at = created_at

    def copy(self) -> 'Game':
        """Return a detached copy, so callers never share the stored instance."""
        return Game(self.title, self.platform, self.status,
                    id=self.id, created_at=self.created_at)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise for API responses."""
        return {
            'id': self.id,
            'title': self.title,
            'platform': self.platform,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Game':
        """Build a game from an already validated payload.

        ``created_at`` is accepted as an ISO-8601 string or a ``datetime``.
        """
        created_at = data.get('created_at')
        if isinstance(created_at, str):
            created_at = datetime.datetime.fromisoformat(created_at)
        return cls(
            title=data['title'],
            platform=data['platform'],
            status=data['status'],
            id=data.get('id'),
            created_at=created_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Game):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (f"Game(id={self.id!r}, title={self.title!r}, "
                f"platform={self.platform!r}, status={self.status!r})")
