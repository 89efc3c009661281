"""In-process game repository, used by tests and throwaway sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ledger.dal.game_repository import GameRepository

if TYPE_CHECKING:
    from ledger.logic.state import Game


class InMemoryGameRepository(GameRepository):
    """Keeps game snapshots in a dict. Snapshots are frozen, so no copying is needed."""

    def __init__(self) -> None:
        self._games: dict[str, Game] = {}

    async def get_game(self, game_id: str) -> Game | None:
        return self._games.get(game_id)

    async def save_game(self, game: Game) -> None:
        self._games[game.id] = game

    async def delete_game(self, game_id: str) -> bool:
        return self._games.pop(game_id, None) is not None

    async def list_games(self) -> list[Game]:
        """Return all games, most recently updated first."""
        return sorted(self._games.values(), key=lambda g: g.updated_date, reverse=True)
