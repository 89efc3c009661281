"""Data access layer: repository interface and implementations for game records."""

from ledger.dal.file_repository import FileGameRepository
from ledger.dal.game_repository import GameRepository
from ledger.dal.memory_repository import InMemoryGameRepository

__all__ = [
    "FileGameRepository",
    "GameRepository",
    "InMemoryGameRepository",
]
