"""Game builders shared by ledger tests."""

from datetime import UTC, datetime

from ledger.logic.enums import PlayerColor
from ledger.logic.game import NewPlayer, init_game
from ledger.logic.settings import GameSettings
from ledger.logic.state import Game

T0 = datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)

POT_RULES = GameSettings(free_parking_enabled=True)
ALL_OUT_RULES = GameSettings(free_parking_enabled=True, free_parking_mode="all_out")
AUTO_BONUS_RULES = GameSettings(free_parking_enabled=True, auto_pot_bonus=True, auto_pot_bonus_amount=500)


def make_game(
    *names: str,
    starting_money: int = 1500,
    settings: GameSettings | None = None,
    pot: int | None = None,
) -> Game:
    """Build a game whose player ids are the lowercased names ("Alice" -> "alice")."""
    names = names or ("Alice", "Bob", "Carol")
    colors = list(PlayerColor)
    players = [NewPlayer(name=name, color=colors[i], id=name.lower()) for i, name in enumerate(names)]
    game = init_game("Test", players, starting_money, settings, game_id="g1", now=T0)
    if pot is not None:
        game = game.model_copy(update={"free_parking_pot": pot})
    return game


def balances(game: Game) -> dict[str, int]:
    return {p.id: p.balance for p in game.players}
