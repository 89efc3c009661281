"""Per-game house rules and fixed game constants."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from ledger.logic.enums import FreeParkingMode, HouseSellPercentage

DEFAULT_STARTING_MONEY = 1500
PASS_GO_AMOUNT = 200
MIN_PLAYERS = 2
MAX_STARTING_PLAYERS = 8


class GameSettings(BaseModel):
    """
    House rules for one game.

    All fields have defaults matching a game created without touching the
    house rules screen. Settings are replaced wholesale, never patched.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # --- Free Parking ---
    free_parking_enabled: bool = False
    free_parking_mode: FreeParkingMode = FreeParkingMode.BASIC
    auto_pot_bonus: bool = False
    auto_pot_bonus_amount: StrictInt = Field(default=500, ge=0)

    # --- Payments ---
    house_sell_percentage: HouseSellPercentage = HouseSellPercentage.HALF
    jail_fee: StrictInt = Field(default=50, ge=1)

    @property
    def auto_refill_active(self) -> bool:
        """True when the pot restocks itself after being drained."""
        return self.free_parking_enabled and self.auto_pot_bonus
