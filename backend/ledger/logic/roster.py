"""
Roster changes: adding players mid-game and removing them.

Removal is a state transition rather than a transaction: the player leaves
the roster and one history record explains where their money went.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from ledger.logic.enums import PlayerColor, TransactionType
from ledger.logic.exceptions import (
    AccountNotFoundError,
    InsufficientRecipientsError,
    InvalidAmountError,
    InvalidPlayerError,
    InvalidTransactionError,
)
from ledger.logic.state import Player, TransactionRecord
from ledger.logic.state_utils import (
    add_player_to_game,
    adjust_player_balance,
    append_record,
    next_timestamp,
    remove_player_from_game,
)
from ledger.logic.types import BANK, MULTIPLE, player_account

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from ledger.logic.state import Game

logger = structlog.get_logger()


def new_player_id() -> str:
    return uuid4().hex


def add_player(
    game: Game,
    name: str,
    color: PlayerColor | str | None,
    starting_money: int,
    *,
    player_id: str | None = None,
    now: datetime | None = None,
) -> Game:
    """
    Add a player to a running game with their starting cash.

    The money comes from the bank and is logged as a player_added record.
    Without a color the first unused one in palette order is assigned.
    """
    name = name.strip()
    if not name:
        raise InvalidPlayerError("player name must not be blank")
    if color is None:
        available = game.available_colors
        if not available:
            raise InvalidPlayerError("no colors available")
        color = available[0]
    try:
        color = PlayerColor(color)
    except ValueError as e:
        raise InvalidPlayerError(f"unknown color {color!r}") from e
    if color in game.used_colors:
        raise InvalidPlayerError(f"color {color.value!r} is already taken")
    if starting_money < 0:
        raise InvalidAmountError(f"starting money must not be negative, got {starting_money}")

    player_id = player_id or new_player_id()
    if game.find_player(player_id) is not None:
        raise InvalidPlayerError(f"player id {player_id!r} already exists")

    player = Player(id=player_id, name=name, color=color, balance=starting_money)
    record = TransactionRecord(
        timestamp=next_timestamp(game, now),
        type=TransactionType.PLAYER_ADDED,
        description=f"{name} joined the game with ${starting_money:,}",
        amount=starting_money,
        source=BANK,
        destination=player_account(player_id),
    )
    logger.debug("player added", game_id=game.id, player_id=player_id, color=color)
    return append_record(add_player_to_game(game, player), record)


def remove_player(game: Game, player_id: str, now: datetime | None = None) -> Game:
    """
    Drop a player out; their money goes back to the bank.

    No other balance changes. The record amount is the balance they held,
    which may be negative.
    """
    player = game.find_player(player_id)
    if player is None:
        raise AccountNotFoundError(player_id)

    record = TransactionRecord(
        timestamp=next_timestamp(game, now),
        type=TransactionType.PLAYER_REMOVED,
        description=f"{player.name} dropped out (funds returned to bank)",
        amount=player.balance,
        source=player_account(player_id),
        destination=BANK,
    )
    logger.debug("player removed", game_id=game.id, player_id=player_id, balance=player.balance)
    return append_record(remove_player_from_game(game, player_id), record)


def split_evenly(total: int, recipient_count: int) -> int:
    """
    Per-recipient share of total, rounded down.

    The remainder of the division is dropped, not redistributed: 1000 split
    three ways pays 333 each and 1 unit leaves the game.
    """
    if recipient_count < 1:
        raise InsufficientRecipientsError("at least one recipient is required")
    return total // recipient_count


def _validate_recipients(game: Game, player_id: str, recipient_ids: Sequence[str]) -> None:
    if not recipient_ids:
        raise InsufficientRecipientsError("at least one recipient is required")
    if len(set(recipient_ids)) != len(recipient_ids):
        raise InvalidTransactionError("recipients must be distinct")
    if player_id in recipient_ids:
        raise InvalidTransactionError("a removed player cannot receive their own wealth")
    for recipient_id in recipient_ids:
        if game.find_player(recipient_id) is None:
            raise AccountNotFoundError(recipient_id)


def remove_player_distribute(
    game: Game,
    player_id: str,
    recipient_ids: Sequence[str],
    now: datetime | None = None,
) -> Game:
    """
    Remove a player and split their balance evenly among recipients.

    Each recipient gains ``balance // len(recipient_ids)``; a single
    player_removed_distribute record carries the total actually paid out.
    """
    player = game.find_player(player_id)
    if player is None:
        raise AccountNotFoundError(player_id)
    recipient_ids = list(recipient_ids)
    _validate_recipients(game, player_id, recipient_ids)

    per_player = split_evenly(player.balance, len(recipient_ids))
    next_game = remove_player_from_game(game, player_id)
    for recipient_id in recipient_ids:
        next_game = adjust_player_balance(next_game, recipient_id, per_player)

    # names listed in roster order, matching what the table sees
    recipient_names = ", ".join(p.name for p in next_game.players if p.id in recipient_ids)
    record = TransactionRecord(
        timestamp=next_timestamp(game, now),
        type=TransactionType.PLAYER_REMOVED_DISTRIBUTE,
        description=f"{player.name} dropped out. ${per_player:,} each distributed to: {recipient_names}",
        amount=per_player * len(recipient_ids),
        source=player_account(player_id),
        destination=MULTIPLE,
    )
    logger.debug(
        "player removed with distribution",
        game_id=game.id,
        player_id=player_id,
        per_player=per_player,
        recipients=len(recipient_ids),
    )
    return append_record(next_game, record)
