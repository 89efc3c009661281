"""
Account resolution: map an account reference to a balance adjuster.

An adjuster is a pure function ``(game, delta) -> game``. Resolution
itself performs the existence check, so callers resolve every leg of a
transaction before building any new state.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from ledger.logic.exceptions import AccountNotFoundError, InvalidTransactionError
from ledger.logic.state_utils import adjust_player_balance, adjust_pot
from ledger.logic.types import BankAccount, MultipleAccount, PlayerAccount, PotAccount

if TYPE_CHECKING:
    from ledger.logic.state import Game
    from ledger.logic.types import AccountRef

BalanceAdjuster = Callable[["Game", int], "Game"]


def _bank_adjuster(game: Game, _delta: int) -> Game:
    return game


def _player_adjuster(player_id: str) -> BalanceAdjuster:
    def adjust(game: Game, delta: int) -> Game:
        return adjust_player_balance(game, player_id, delta)

    return adjust


def resolve_account(game: Game, ref: AccountRef) -> BalanceAdjuster:
    """
    Resolve an account reference against the current game.

    Raises:
        AccountNotFoundError: player reference with an unknown id
        InvalidTransactionError: the MultipleAccount marker

    """
    if isinstance(ref, BankAccount):
        return _bank_adjuster
    if isinstance(ref, PotAccount):
        return adjust_pot
    if isinstance(ref, PlayerAccount):
        if game.find_player(ref.player_id) is None:
            raise AccountNotFoundError(ref.player_id)
        return _player_adjuster(ref.player_id)
    if isinstance(ref, MultipleAccount):
        raise InvalidTransactionError("the 'multiple' marker cannot be used as a transaction account")
    raise InvalidTransactionError(f"unknown account reference: {ref!r}")

