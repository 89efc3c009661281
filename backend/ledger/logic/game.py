"""
Game initialization and whole-game updates (house rules, notes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from pydantic import BaseModel, ConfigDict

from ledger.logic.enums import PlayerColor
from ledger.logic.exceptions import InvalidAmountError, InvalidPlayerError
from ledger.logic.policy import initial_pot, pot_after_settings_change
from ledger.logic.settings import DEFAULT_STARTING_MONEY, MAX_STARTING_PLAYERS, MIN_PLAYERS, GameSettings
from ledger.logic.state import Game, Player, utc_now

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

logger = structlog.get_logger()


class NewPlayer(BaseModel):
    """A seat filled in on the new game screen; blank names are skipped."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    color: PlayerColor
    id: str | None = None


def default_game_name(now: datetime) -> str:
    return f"Game {now.date().isoformat()}"


def init_game(
    name: str,
    players: Sequence[NewPlayer],
    starting_money: int = DEFAULT_STARTING_MONEY,
    settings: GameSettings | None = None,
    *,
    game_id: str | None = None,
    now: datetime | None = None,
) -> Game:
    """
    Create a new game with every named player holding the starting money.

    Entries with blank names are dropped before the roster size check, so
    the table can leave unused seats empty. The pot starts stocked when the
    Free Parking auto bonus is already switched on.
    """
    settings = settings or GameSettings()
    now = now or utc_now()

    named = [p for p in players if p.name.strip()]
    if len(named) < MIN_PLAYERS:
        raise InvalidPlayerError(f"at least {MIN_PLAYERS} named players are required, got {len(named)}")
    if len(named) > MAX_STARTING_PLAYERS:
        raise InvalidPlayerError(f"at most {MAX_STARTING_PLAYERS} players can start a game, got {len(named)}")
    colors = [p.color for p in named]
    if len(set(colors)) != len(colors):
        raise InvalidPlayerError("each player needs a different color")
    if starting_money < 0:
        raise InvalidAmountError(f"starting money must not be negative, got {starting_money}")

    roster = tuple(
        Player(
            id=p.id or uuid4().hex,
            name=p.name.strip(),
            color=p.color,
            balance=starting_money,
        )
        for p in named
    )
    if len({p.id for p in roster}) != len(roster):
        raise InvalidPlayerError("player ids must be unique")

    game = Game(
        id=game_id or uuid4().hex,
        name=name.strip() or default_game_name(now),
        players=roster,
        free_parking_pot=initial_pot(settings),
        notes="",
        settings=settings,
        transaction_history=(),
        updated_date=now,
    )
    logger.info("game created", game_id=game.id, players=len(roster), starting_money=starting_money)
    return game


def update_settings(game: Game, settings: GameSettings) -> Game:
    """Replace the house rules; an empty pot is seeded if the auto bonus is now on."""
    pot = pot_after_settings_change(settings, game.free_parking_pot)
    return game.model_copy(update={"settings": settings, "free_parking_pot": pot})


def update_notes(game: Game, notes: str) -> Game:
    return game.model_copy(update={"notes": notes})
