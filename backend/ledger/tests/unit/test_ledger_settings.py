import pytest
from pydantic import ValidationError

from ledger.logic.enums import FreeParkingMode, HouseSellPercentage
from ledger.logic.settings import GameSettings


class TestGameSettings:
    def test_defaults(self):
        settings = GameSettings()
        assert settings.free_parking_enabled is False
        assert settings.free_parking_mode == FreeParkingMode.BASIC
        assert settings.auto_pot_bonus is False
        assert settings.auto_pot_bonus_amount == 500
        assert settings.house_sell_percentage == HouseSellPercentage.HALF
        assert settings.jail_fee == 50

    def test_auto_refill_needs_free_parking(self):
        assert GameSettings(auto_pot_bonus=True).auto_refill_active is False
        assert GameSettings(free_parking_enabled=True, auto_pot_bonus=True).auto_refill_active is True

    def test_parses_wire_values(self):
        settings = GameSettings.model_validate({"free_parking_mode": "all_out", "house_sell_percentage": 100})
        assert settings.free_parking_mode == FreeParkingMode.ALL_OUT
        assert settings.house_sell_percentage == HouseSellPercentage.FULL

    @pytest.mark.parametrize(
        "payload",
        [
            {"house_sell_percentage": 75},
            {"free_parking_mode": "jackpot"},
            {"jail_fee": -1},
            {"jail_fee": 0},
            {"jail_fee": True},
            {"auto_pot_bonus_amount": True},
            {"auto_pot_bonus_amount": -500},
            {"starting_cash": 1500},
        ],
    )
    def test_rejects_out_of_domain_values(self, payload):
        with pytest.raises(ValidationError):
            GameSettings.model_validate(payload)

    def test_is_frozen(self):
        with pytest.raises(ValidationError):
            GameSettings().jail_fee = 100
