"""Unit tests for game state models and immutable update helpers."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from ledger.logic.enums import PlayerColor, TransactionType
from ledger.logic.exceptions import AccountNotFoundError
from ledger.logic.state import Game, Player, TransactionRecord
from ledger.logic.state_utils import (
    adjust_player_balance,
    adjust_pot,
    append_record,
    next_timestamp,
    remove_player_from_game,
    touch,
    update_player,
)
from ledger.logic.types import BANK, player_account
from ledger.tests.helpers import T0, make_game


def _record(timestamp):
    return TransactionRecord(
        timestamp=timestamp,
        type=TransactionType.BONUS,
        description="",
        amount=1,
        source=BANK,
        destination=player_account("alice"),
    )


class TestGameModel:
    def test_is_frozen(self):
        game = make_game()
        with pytest.raises(ValidationError):
            game.free_parking_pot = 10

    def test_rejects_duplicate_player_ids(self):
        players = (
            Player(id="p", name="A", color=PlayerColor.RED, balance=0),
            Player(id="p", name="B", color=PlayerColor.BLUE, balance=0),
        )
        with pytest.raises(ValidationError, match="ids must be unique"):
            Game(id="g", name="g", players=players)

    def test_rejects_duplicate_colors(self):
        players = (
            Player(id="a", name="A", color=PlayerColor.RED, balance=0),
            Player(id="b", name="B", color=PlayerColor.RED, balance=0),
        )
        with pytest.raises(ValidationError, match="colors must be unique"):
            Game(id="g", name="g", players=players)

    def test_available_colors_in_palette_order(self):
        game = make_game("Alice", "Bob")
        assert game.available_colors[:2] == [PlayerColor.AMBER, PlayerColor.YELLOW]
        assert len(game.available_colors) == len(PlayerColor) - 2

    def test_total_money_includes_pot(self):
        assert make_game(pot=250).total_money == 3 * 1500 + 250

    def test_json_round_trip_keeps_account_kinds(self):
        game = append_record(make_game(), _record(T0))
        restored = Game.model_validate(game.model_dump(mode="json"))
        assert restored == game


class TestStateUtils:
    def test_update_player_leaves_others(self):
        game = make_game()
        result = update_player(game, "bob", name="Robert")
        assert [p.name for p in result.players] == ["Alice", "Robert", "Carol"]
        assert game.players[1].name == "Bob"

    def test_update_unknown_player(self):
        with pytest.raises(AccountNotFoundError):
            adjust_player_balance(make_game(), "zed", 5)

    def test_adjust_pot(self):
        assert adjust_pot(make_game(pot=10), -25).free_parking_pot == -15

    def test_remove_player_keeps_order(self):
        result = remove_player_from_game(make_game(), "alice")
        assert [p.id for p in result.players] == ["bob", "carol"]

    def test_next_timestamp_is_clamped(self):
        game = append_record(make_game(), _record(T0))
        assert next_timestamp(game, T0 - timedelta(seconds=1)) == T0
        assert next_timestamp(game, T0 + timedelta(seconds=1)) == T0 + timedelta(seconds=1)

    def test_touch(self):
        later = T0 + timedelta(hours=1)
        assert touch(make_game(), later).updated_date == later
