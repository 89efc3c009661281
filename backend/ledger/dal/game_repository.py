"""Abstract interface for game record persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledger.logic.state import Game


class GameRepository(ABC):
    """Abstract interface for game record persistence.

    One record per game, keyed by game id. Implementations can use files,
    SQLite, etc.
    """

    @abstractmethod
    async def get_game(self, game_id: str) -> Game | None: ...

    @abstractmethod
    async def save_game(self, game: Game) -> None: ...

    @abstractmethod
    async def delete_game(self, game_id: str) -> bool: ...

    @abstractmethod
    async def list_games(self) -> list[Game]: ...
