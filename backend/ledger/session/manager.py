"""
Session manager: serialized load-apply-save cycles against the game repository.

Every mutation runs under one asyncio.Lock, loads the latest snapshot,
applies a pure ledger function, stamps updated_date and saves the result.
The manager also owns the delayed pot refill that follows a manual
Free Parking collection.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from ledger.logic import engine, roster
from ledger.logic import game as game_ops
from ledger.logic.exceptions import GameNotFoundError
from ledger.logic.settings import DEFAULT_STARTING_MONEY
from ledger.logic.state_utils import touch
from ledger.session.refill_scheduler import DEFAULT_REFILL_DELAY_SECONDS, PotRefillScheduler

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ledger.dal.game_repository import GameRepository
    from ledger.logic.engine import TransactionRequest
    from ledger.logic.enums import PlayerColor
    from ledger.logic.game import NewPlayer
    from ledger.logic.settings import GameSettings
    from ledger.logic.state import Game

    # Builds the transaction(s) for an action from the freshly loaded game.
    IntentBuilder = Callable[[Game], TransactionRequest | Sequence[TransactionRequest]]

logger = structlog.get_logger()


class SessionManager:
    def __init__(
        self,
        game_repository: GameRepository,
        refill_delay_seconds: float = DEFAULT_REFILL_DELAY_SECONDS,
    ) -> None:
        self._game_repository = game_repository
        self._lock = asyncio.Lock()
        self._refill_scheduler = PotRefillScheduler(
            on_refill=self._handle_refill_due,
            delay_seconds=refill_delay_seconds,
        )

    @property
    def refill_scheduler(self) -> PotRefillScheduler:
        return self._refill_scheduler

    async def _load(self, game_id: str) -> Game:
        game = await self._game_repository.get_game(game_id)
        if game is None:
            raise GameNotFoundError(game_id)
        return game

    async def _mutate(self, game_id: str, operation: Callable[[Game], Game]) -> Game:
        """Run one read-modify-write cycle. Nothing is saved if operation raises."""
        async with self._lock:
            game = await self._load(game_id)
            next_game = touch(operation(game))
            await self._game_repository.save_game(next_game)
            return next_game

    async def create_game(
        self,
        name: str,
        players: Sequence[NewPlayer],
        starting_money: int = DEFAULT_STARTING_MONEY,
        settings: GameSettings | None = None,
    ) -> Game:
        game = game_ops.init_game(name, players, starting_money, settings)
        async with self._lock:
            await self._game_repository.save_game(game)
        return game

    async def get_game(self, game_id: str) -> Game:
        return await self._load(game_id)

    async def list_games(self) -> list[Game]:
        return await self._game_repository.list_games()

    async def delete_game(self, game_id: str) -> None:
        """Delete a game and drop its pending refill so it cannot be recreated."""
        async with self._lock:
            self._refill_scheduler.cancel(game_id)
            deleted = await self._game_repository.delete_game(game_id)
        if not deleted:
            raise GameNotFoundError(game_id)
        logger.info("game deleted", game_id=game_id)

    async def apply_transaction(self, game_id: str, request: TransactionRequest) -> Game:
        next_game = await self._mutate(game_id, lambda game: engine.apply_transaction(game, request))
        logger.info(
            "transaction applied",
            game_id=game_id,
            type=request.type,
            amount=request.amount,
            pot=next_game.free_parking_pot,
        )
        return next_game

    async def apply_transactions(self, game_id: str, requests: Sequence[TransactionRequest]) -> Game:
        next_game = await self._mutate(game_id, lambda game: engine.apply_transactions(game, requests))
        logger.info("transactions applied", game_id=game_id, count=len(requests))
        return next_game

    async def apply_intent(self, game_id: str, build: IntentBuilder) -> Game:
        """
        Build transactions from the current game and apply them atomically.

        Builders read house rules from the snapshot loaded under the lock,
        so routing always reflects the settings in force when the money moves.
        """

        def operation(game: Game) -> Game:
            built = build(game)
            if isinstance(built, engine.TransactionRequest):
                return engine.apply_transaction(game, built)
            return engine.apply_transactions(game, built)

        next_game = await self._mutate(game_id, operation)
        logger.info("intent applied", game_id=game_id, history_size=len(next_game.transaction_history))
        return next_game

    async def collect_pot(self, game_id: str, player_id: str) -> Game:
        """Pay out the pot, then queue the delayed refill if the auto bonus is on."""
        next_game = await self._mutate(game_id, lambda game: engine.collect_pot(game, player_id))
        logger.info("pot collected", game_id=game_id, player_id=player_id)
        if next_game.settings.auto_refill_active:
            self._refill_scheduler.schedule(game_id)
        return next_game

    async def add_player(
        self,
        game_id: str,
        name: str,
        color: PlayerColor | str | None,
        starting_money: int,
    ) -> Game:
        next_game = await self._mutate(
            game_id,
            lambda game: roster.add_player(game, name, color, starting_money),
        )
        logger.info("player added", game_id=game_id, players=len(next_game.players))
        return next_game

    async def remove_player(self, game_id: str, player_id: str) -> Game:
        next_game = await self._mutate(game_id, lambda game: roster.remove_player(game, player_id))
        logger.info("player removed", game_id=game_id, player_id=player_id)
        return next_game

    async def remove_player_distribute(self, game_id: str, player_id: str, recipient_ids: Sequence[str]) -> Game:
        next_game = await self._mutate(
            game_id,
            lambda game: roster.remove_player_distribute(game, player_id, recipient_ids),
        )
        logger.info(
            "player removed with distribution",
            game_id=game_id,
            player_id=player_id,
            recipients=len(recipient_ids),
        )
        return next_game

    async def update_settings(self, game_id: str, settings: GameSettings) -> Game:
        """Replace house rules; a refill queued under the old rules is dropped."""
        next_game = await self._mutate(game_id, lambda game: game_ops.update_settings(game, settings))
        self._refill_scheduler.cancel(game_id)
        logger.info("settings updated", game_id=game_id, pot=next_game.free_parking_pot)
        return next_game

    async def update_notes(self, game_id: str, notes: str) -> Game:
        return await self._mutate(game_id, lambda game: game_ops.update_notes(game, notes))

    async def _handle_refill_due(self, game_id: str) -> None:
        """Apply the delayed refill against the game as it is now.

        A deleted game stays deleted, and a pot that is no longer drained
        (or rules that no longer ask for a refill) leave the game untouched.
        """
        async with self._lock:
            game = await self._game_repository.get_game(game_id)
            if game is None:
                logger.info("pot refill skipped, game no longer exists", game_id=game_id)
                return
            refilled = engine.refill_pot(game)
            if refilled is game:
                logger.info("pot refill skipped, not needed", game_id=game_id, pot=game.free_parking_pot)
                return
            await self._game_repository.save_game(touch(refilled))
        logger.info("pot refilled", game_id=game_id, pot=refilled.free_parking_pot)

    def shutdown(self) -> None:
        self._refill_scheduler.cancel_all()
