"""
Immutable state update utilities using Pydantic model_copy.

Provides helper functions for common immutable updates on the frozen
Game model. These functions never mutate the input state - they always
return new state objects with the requested changes applied.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ledger.logic.exceptions import AccountNotFoundError
from ledger.logic.state import Game, Player, TransactionRecord, utc_now

if TYPE_CHECKING:
    from datetime import datetime


def update_player(
    game: Game,
    player_id: str,
    **updates: object,
) -> Game:
    """
    Return new game with updated player.

    Args:
        game: Current game
        player_id: Id of the player to update
        **updates: Fields to update on the player

    Returns:
        New Game with updated player

    Raises:
        AccountNotFoundError: If no player has that id

    """
    index = game.player_index(player_id)
    if index is None:
        raise AccountNotFoundError(player_id)
    players = list(game.players)
    players[index] = game.players[index].model_copy(update=updates)
    return game.model_copy(update={"players": tuple(players)})


def adjust_player_balance(game: Game, player_id: str, delta: int) -> Game:
    """Return new game with delta added to the player's balance."""
    player = game.find_player(player_id)
    if player is None:
        raise AccountNotFoundError(player_id)
    return update_player(game, player_id, balance=player.balance + delta)


def adjust_pot(game: Game, delta: int) -> Game:
    """Return new game with delta added to the Free Parking pot."""
    return game.model_copy(update={"free_parking_pot": game.free_parking_pot + delta})


def set_pot(game: Game, amount: int) -> Game:
    return game.model_copy(update={"free_parking_pot": amount})


def add_player_to_game(game: Game, player: Player) -> Game:
    """Return new game with player appended to the roster."""
    return game.model_copy(update={"players": (*game.players, player)})


def remove_player_from_game(game: Game, player_id: str) -> Game:
    """Return new game without the given player, preserving roster order."""
    if game.find_player(player_id) is None:
        raise AccountNotFoundError(player_id)
    players = tuple(p for p in game.players if p.id != player_id)
    return game.model_copy(update={"players": players})


def next_timestamp(game: Game, now: datetime | None = None) -> datetime:
    """
    Return a timestamp for the next history record.

    Clamped to the latest recorded timestamp so history order stays
    non-decreasing even if the wall clock steps backwards.
    """
    timestamp = now if now is not None else utc_now()
    if game.transaction_history:
        last = game.transaction_history[-1].timestamp
        if timestamp < last:
            return last
    return timestamp


def append_record(game: Game, record: TransactionRecord) -> Game:
    """Return new game with record appended to the transaction history."""
    return game.model_copy(update={"transaction_history": (*game.transaction_history, record)})


def touch(game: Game, now: datetime | None = None) -> Game:
    """Return new game with updated_date refreshed."""
    return game.model_copy(update={"updated_date": now if now is not None else utc_now()})
