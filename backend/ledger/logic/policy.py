"""
House-rule policy: fund routing, sell-back payouts and pot replenishment.

Every function here is pure and reads only GameSettings (plus the current
pot where the rule depends on it). The policy never looks at transaction
types; callers pick the resolver matching the payment they are building.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ledger.logic.enums import FreeParkingMode, HouseSellPercentage
from ledger.logic.exceptions import InvalidAmountError
from ledger.logic.types import BANK, POT

if TYPE_CHECKING:
    from ledger.logic.settings import GameSettings
    from ledger.logic.types import BankAccount, PotAccount


def resolve_destination(settings: GameSettings) -> BankAccount | PotAccount:
    """Destination for jail fees and taxes: the pot whenever Free Parking is on."""
    if not settings.free_parking_enabled:
        return BANK
    return POT


def resolve_purchase_destination(settings: GameSettings) -> BankAccount | PotAccount:
    """Destination for property, house and unmortgage payments.

    These only feed the pot under the "all out" Free Parking variant.
    """
    if settings.free_parking_enabled and settings.free_parking_mode == FreeParkingMode.ALL_OUT:
        return POT
    return BANK


def calculate_sell_payout(unit_cost: int, quantity: int, percentage: HouseSellPercentage | int) -> int:
    """
    Bank payout for selling houses/hotels back.

    Computed as floor(unit_cost * quantity * percentage / 100) using integer
    arithmetic. Only the percentages in HouseSellPercentage are accepted.
    """
    percentage = HouseSellPercentage(percentage)
    if unit_cost <= 0:
        raise InvalidAmountError(f"unit cost must be positive, got {unit_cost}")
    if quantity < 1:
        raise InvalidAmountError(f"quantity must be at least 1, got {quantity}")
    return unit_cost * quantity * percentage.value // 100


def should_refill_pot(settings: GameSettings, pot: int) -> bool:
    """True when the pot is drained and the auto bonus rule restocks it."""
    return settings.auto_refill_active and pot <= 0


def refilled_pot(settings: GameSettings, pot: int) -> int:
    """Pot value after the auto-refill rule; a deficit is discarded, not carried."""
    if should_refill_pot(settings, pot):
        return settings.auto_pot_bonus_amount
    return pot


def initial_pot(settings: GameSettings) -> int:
    """Pot value for a freshly created game."""
    if settings.auto_refill_active:
        return settings.auto_pot_bonus_amount
    return 0


def pot_after_settings_change(settings: GameSettings, pot: int) -> int:
    """Seed an exactly-empty pot when the saved rules turn the auto bonus on."""
    if settings.auto_refill_active and pot == 0:
        return settings.auto_pot_bonus_amount
    return pot
