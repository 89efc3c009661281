"""
Game state models for the ledger.

All models are frozen; state changes go through ``model_copy(update=...)``
in state_utils and never mutate an existing snapshot.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ledger.logic.enums import PlayerColor, TransactionType
from ledger.logic.settings import GameSettings
from ledger.logic.types import AccountRef


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class Player(BaseModel):
    """
    A player at the table and their cash on hand.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    color: PlayerColor
    balance: int  # may go negative, solvency is not enforced


class TransactionRecord(BaseModel):
    """
    One entry in the append-only transaction history.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    type: TransactionType
    description: str
    amount: int
    source: AccountRef
    destination: AccountRef


class Game(BaseModel):
    """
    Full persisted record of one game session.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    players: tuple[Player, ...] = ()
    free_parking_pot: int = 0
    notes: str = ""
    settings: GameSettings = Field(default_factory=GameSettings)
    transaction_history: tuple[TransactionRecord, ...] = ()
    updated_date: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def _check_unique_players(self) -> Game:
        ids = [p.id for p in self.players]
        if len(set(ids)) != len(ids):
            raise ValueError("player ids must be unique within a game")
        colors = [p.color for p in self.players]
        if len(set(colors)) != len(colors):
            raise ValueError("player colors must be unique within a game")
        return self

    def find_player(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def player_index(self, player_id: str) -> int | None:
        for index, player in enumerate(self.players):
            if player.id == player_id:
                return index
        return None

    @property
    def used_colors(self) -> frozenset[PlayerColor]:
        return frozenset(p.color for p in self.players)

    @property
    def available_colors(self) -> list[PlayerColor]:
        """Unused colors in palette order."""
        used = self.used_colors
        return [color for color in PlayerColor if color not in used]

    @property
    def total_money(self) -> int:
        """Sum of all player balances plus the pot."""
        return sum(p.balance for p in self.players) + self.free_parking_pot
