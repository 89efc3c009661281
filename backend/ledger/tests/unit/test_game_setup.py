import pytest

from ledger.logic.enums import PlayerColor
from ledger.logic.exceptions import InvalidAmountError, InvalidPlayerError
from ledger.logic.game import NewPlayer, default_game_name, init_game, update_notes, update_settings
from ledger.logic.settings import GameSettings
from ledger.tests.helpers import AUTO_BONUS_RULES, POT_RULES, T0, make_game


def _seats(*names):
    colors = list(PlayerColor)
    return [NewPlayer(name=name, color=colors[i]) for i, name in enumerate(names)]


class TestInitGame:
    def test_every_player_gets_starting_money(self):
        game = init_game("Friday", _seats("Alice", "Bob"), 2000, now=T0)
        assert game.name == "Friday"
        assert [p.balance for p in game.players] == [2000, 2000]
        assert game.free_parking_pot == 0
        assert game.transaction_history == ()
        assert game.updated_date == T0

    def test_defaults(self):
        game = init_game("", _seats("Alice", "Bob"), now=T0)
        assert game.name == default_game_name(T0) == "Game 2025-06-01"
        assert game.players[0].balance == 1500
        assert game.settings == GameSettings()

    def test_blank_seats_are_skipped(self):
        game = init_game("x", _seats("Alice", "  ", "Bob", ""))
        assert [p.name for p in game.players] == ["Alice", "Bob"]

    def test_ids_are_generated_and_unique(self):
        game = init_game("x", _seats("Alice", "Bob", "Carol"))
        assert len({p.id for p in game.players}) == 3

    def test_pot_starts_stocked_with_auto_bonus(self):
        game = init_game("x", _seats("Alice", "Bob"), settings=AUTO_BONUS_RULES)
        assert game.free_parking_pot == 500

    @pytest.mark.parametrize("names", [("Alice",), ("Alice", " "), tuple(f"P{i}" for i in range(9))])
    def test_player_count_out_of_range(self, names):
        with pytest.raises(InvalidPlayerError):
            init_game("x", _seats(*names))

    def test_repeated_color(self):
        seats = [NewPlayer(name="Alice", color=PlayerColor.RED), NewPlayer(name="Bob", color=PlayerColor.RED)]
        with pytest.raises(InvalidPlayerError, match="color"):
            init_game("x", seats)

    def test_negative_starting_money(self):
        with pytest.raises(InvalidAmountError):
            init_game("x", _seats("Alice", "Bob"), -100)


class TestUpdateSettings:
    def test_seeds_empty_pot_when_auto_bonus_turns_on(self):
        game = make_game(settings=POT_RULES)
        result = update_settings(game, AUTO_BONUS_RULES)
        assert result.settings == AUTO_BONUS_RULES
        assert result.free_parking_pot == 500

    def test_keeps_existing_pot(self):
        game = make_game(settings=POT_RULES, pot=90)
        assert update_settings(game, AUTO_BONUS_RULES).free_parking_pot == 90

    def test_turning_free_parking_off_keeps_pot(self):
        game = make_game(settings=POT_RULES, pot=90)
        assert update_settings(game, GameSettings()).free_parking_pot == 90

    def test_writes_no_history(self):
        assert update_settings(make_game(), AUTO_BONUS_RULES).transaction_history == ()


class TestUpdateNotes:
    def test_replaces_notes(self):
        game = update_notes(make_game(), "Bob owes Carol a pizza")
        assert update_notes(game, "").notes == ""
        assert game.notes == "Bob owes Carol a pizza"
