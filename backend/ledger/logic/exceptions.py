"""Typed domain exceptions for ledger rule violations.

All refused ledger operations raise subclasses of LedgerError rather than
raw ValueError. Every check runs before the next game snapshot is built,
so a raised error means the caller's snapshot is still the current one.
The HTTP layer converts these into error responses using ``code``.
"""

from ledger.logic.enums import LedgerErrorCode


class LedgerError(Exception):
    """Base exception for refused ledger operations."""

    code: LedgerErrorCode = LedgerErrorCode.INVALID_TRANSACTION


class InvalidAmountError(LedgerError):
    """Amount is not a positive integer (or a count is below one)."""

    code = LedgerErrorCode.INVALID_AMOUNT


class AccountNotFoundError(LedgerError):
    """A player account reference does not match any player in the game.

    Attributes:
        player_id: The id that failed to resolve.

    """

    code = LedgerErrorCode.ACCOUNT_NOT_FOUND

    def __init__(self, player_id: str) -> None:
        self.player_id = player_id
        super().__init__(f"no player with id {player_id!r}")


class InsufficientRecipientsError(LedgerError):
    """Wealth distribution was requested without any recipient."""

    code = LedgerErrorCode.INSUFFICIENT_RECIPIENTS


class InvalidTransactionError(LedgerError):
    """Transaction shape is not allowed (same account on both legs, marker account, etc.)."""

    code = LedgerErrorCode.INVALID_TRANSACTION


class InvalidPlayerError(LedgerError):
    """Player data is not acceptable (blank name, color taken, roster size)."""

    code = LedgerErrorCode.INVALID_PLAYER


class GameNotFoundError(LedgerError):
    """No stored game has the requested id."""

    code = LedgerErrorCode.GAME_NOT_FOUND

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(f"game {game_id!r} not found")
