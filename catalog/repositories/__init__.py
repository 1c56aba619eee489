"""Repository package: expose the contract and both backends from one import."""
from .base import GameRepository, StorageError
from .memory_repository import InMemoryGameRepository
from .sql_repository import SqlGameRepository

__all__ = [
    'GameRepository',
    'StorageError',
    'InMemoryGameRepository',
    'SqlGameRepository',
]
