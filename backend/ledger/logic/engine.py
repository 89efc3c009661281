"""
Ledger engine: apply money movements to a game snapshot.

Every public function takes the current Game and returns the next one.
All validation happens before the next snapshot is built, so an error
leaves nothing half-applied and the caller keeps its prior state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict, StrictInt

from ledger.logic.accounts import resolve_account
from ledger.logic.enums import TransactionType
from ledger.logic.exceptions import AccountNotFoundError, InvalidAmountError, InvalidTransactionError
from ledger.logic.policy import refilled_pot
from ledger.logic.state import TransactionRecord
from ledger.logic.state_utils import adjust_player_balance, append_record, next_timestamp, set_pot
from ledger.logic.types import POT, AccountRef, PotAccount, account_label, player_account

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from ledger.logic.state import Game

logger = structlog.get_logger()


class TransactionRequest(BaseModel):
    """A fully formed intent to move ``amount`` from ``source`` to ``destination``."""

    model_config = ConfigDict(frozen=True)

    source: AccountRef
    destination: AccountRef
    amount: StrictInt
    type: TransactionType
    description: str = ""


def _validate_request(request: TransactionRequest) -> None:
    if request.amount <= 0:
        raise InvalidAmountError(f"amount must be a positive integer, got {request.amount}")
    if request.source == request.destination:
        raise InvalidTransactionError(f"source and destination are the same account ({account_label(request.source)})")


def apply_transaction(game: Game, request: TransactionRequest, now: datetime | None = None) -> Game:
    """
    Move money between two accounts and record it.

    Steps:
    1. Debit the source and credit the destination (bank legs are no-ops).
    2. When the pot was the source, apply the auto-refill rule: a pot left at
       or below zero is reset to the auto bonus amount.
    3. Append one history record.

    Raises:
        InvalidAmountError: amount is not positive
        InvalidTransactionError: same account on both legs, or a marker account
        AccountNotFoundError: a player leg references an unknown id

    """
    _validate_request(request)
    debit = resolve_account(game, request.source)
    credit = resolve_account(game, request.destination)

    next_game = debit(game, -request.amount)
    if isinstance(request.source, PotAccount):
        next_game = set_pot(next_game, refilled_pot(next_game.settings, next_game.free_parking_pot))
    next_game = credit(next_game, request.amount)

    record = TransactionRecord(
        timestamp=next_timestamp(game, now),
        type=request.type,
        description=request.description,
        amount=request.amount,
        source=request.source,
        destination=request.destination,
    )
    next_game = append_record(next_game, record)

    logger.debug(
        "transaction applied",
        game_id=game.id,
        type=request.type,
        amount=request.amount,
        source=account_label(request.source),
        destination=account_label(request.destination),
        pot=next_game.free_parking_pot,
    )
    return next_game


def apply_transactions(game: Game, requests: Iterable[TransactionRequest], now: datetime | None = None) -> Game:
    """
    Apply a batch of transactions in order, one history record each.

    The batch is all-or-nothing: if any request is refused, the error
    propagates and no intermediate snapshot escapes.
    """
    requests = tuple(requests)
    if not requests:
        raise InvalidTransactionError("transaction batch is empty")
    next_game = game
    for request in requests:
        next_game = apply_transaction(next_game, request, now)
    return next_game


def collect_pot(game: Game, player_id: str, now: datetime | None = None) -> Game:
    """
    Pay the whole Free Parking pot to a player and leave the pot at zero.

    The immediate auto-refill rule is not applied here; restocking after a
    manual collection is a delayed effect owned by the session layer.
    """
    player = game.find_player(player_id)
    if player is None:
        raise AccountNotFoundError(player_id)
    amount = game.free_parking_pot
    if amount <= 0:
        raise InvalidAmountError("the Free Parking pot is empty")

    next_game = adjust_player_balance(game, player_id, amount)
    next_game = set_pot(next_game, 0)
    record = TransactionRecord(
        timestamp=next_timestamp(game, now),
        type=TransactionType.FREE_PARKING_COLLECT,
        description=f"{player.name} collected Free Parking pot of ${amount:,}",
        amount=amount,
        source=POT,
        destination=player_account(player_id),
    )
    logger.debug("pot collected", game_id=game.id, player_id=player_id, amount=amount)
    return append_record(next_game, record)


def refill_pot(game: Game) -> Game:
    """
    Restock a drained pot if the current rules still ask for it.

    Used by the delayed refill after a manual collection; the check is made
    against the game as it is now, not as it was when the refill was queued.
    No history record is written.
    """
    pot = refilled_pot(game.settings, game.free_parking_pot)
    if pot == game.free_parking_pot:
        return game
    return set_pot(game, pot)
