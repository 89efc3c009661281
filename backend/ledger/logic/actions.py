"""
Builders for the transactions each table action produces.

Each builder turns what the table reports ("Alice paid $150 tax") into a
TransactionRequest, picking the house-rule destination itself where the
payment is rule-governed. Builders do not touch game state; the engine
applies what they return.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ledger.logic.engine import TransactionRequest
from ledger.logic.enums import PayoutDirection, TransactionType
from ledger.logic.exceptions import AccountNotFoundError, InvalidAmountError, InvalidTransactionError
from ledger.logic.policy import calculate_sell_payout, resolve_destination, resolve_purchase_destination
from ledger.logic.settings import PASS_GO_AMOUNT
from ledger.logic.types import BANK, POT, BankAccount, PlayerAccount, PotAccount, player_account

if TYPE_CHECKING:
    from ledger.logic.settings import GameSettings
    from ledger.logic.state import Game
    from ledger.logic.types import AccountRef


def _money(amount: int) -> str:
    return f"${amount:,}"


def _plural(quantity: int) -> str:
    return "house/hotel" if quantity == 1 else "houses/hotels"


def _require_quantity(quantity: int) -> None:
    if quantity < 1:
        raise InvalidAmountError(f"quantity must be at least 1, got {quantity}")


def pass_go(player_id: str) -> TransactionRequest:
    return TransactionRequest(
        source=BANK,
        destination=player_account(player_id),
        amount=PASS_GO_AMOUNT,
        type=TransactionType.PASS_GO,
        description=f"Passed GO - collected {_money(PASS_GO_AMOUNT)}",
    )


def bonus(player_id: str, amount: int) -> TransactionRequest:
    return TransactionRequest(
        source=BANK,
        destination=player_account(player_id),
        amount=amount,
        type=TransactionType.BONUS,
        description=f"Bonus of {_money(amount)}",
    )


def pay_rent(payer_id: str, receiver_id: str, amount: int) -> TransactionRequest:
    return TransactionRequest(
        source=player_account(payer_id),
        destination=player_account(receiver_id),
        amount=amount,
        type=TransactionType.RENT,
        description=f"Rent payment of {_money(amount)}",
    )


def purchase_property(settings: GameSettings, player_id: str, amount: int) -> TransactionRequest:
    return TransactionRequest(
        source=player_account(player_id),
        destination=resolve_purchase_destination(settings),
        amount=amount,
        type=TransactionType.PROPERTY_PURCHASE,
        description=f"Property purchase for {_money(amount)}",
    )


def purchase_houses(settings: GameSettings, player_id: str, unit_cost: int, quantity: int) -> TransactionRequest:
    _require_quantity(quantity)
    total = unit_cost * quantity
    return TransactionRequest(
        source=player_account(player_id),
        destination=resolve_purchase_destination(settings),
        amount=total,
        type=TransactionType.HOUSE_PURCHASE,
        description=f"Purchased {quantity} {_plural(quantity)} for {_money(total)}",
    )


def sell_houses(settings: GameSettings, player_id: str, unit_cost: int, quantity: int) -> TransactionRequest:
    """The bank buys houses back at the house-rule percentage of their cost."""
    payout = calculate_sell_payout(unit_cost, quantity, settings.house_sell_percentage)
    percentage = settings.house_sell_percentage.value
    return TransactionRequest(
        source=BANK,
        destination=player_account(player_id),
        amount=payout,
        type=TransactionType.SELL_HOUSES,
        description=f"Sold {quantity} {_plural(quantity)} for {_money(payout)} ({percentage}% of cost)",
    )


def mortgage(player_id: str, amount: int) -> TransactionRequest:
    return TransactionRequest(
        source=BANK,
        destination=player_account(player_id),
        amount=amount,
        type=TransactionType.MORTGAGE,
        description=f"Mortgaged property for {_money(amount)}",
    )


def unmortgage(settings: GameSettings, player_id: str, amount: int) -> TransactionRequest:
    return TransactionRequest(
        source=player_account(player_id),
        destination=resolve_purchase_destination(settings),
        amount=amount,
        type=TransactionType.UNMORTGAGE,
        description=f"Unmortgaged property for {_money(amount)}",
    )


def pay_jail_fee(settings: GameSettings, player_id: str) -> TransactionRequest:
    fee = settings.jail_fee
    return TransactionRequest(
        source=player_account(player_id),
        destination=resolve_destination(settings),
        amount=fee,
        type=TransactionType.JAIL_PAYMENT,
        description=f"Jail fee payment of {_money(fee)}",
    )


def pay_tax(settings: GameSettings, player_id: str, amount: int) -> TransactionRequest:
    return TransactionRequest(
        source=player_account(player_id),
        destination=resolve_destination(settings),
        amount=amount,
        type=TransactionType.TAX_PAYMENT,
        description=f"Tax payment of {_money(amount)}",
    )


def auction(player_id: str, amount: int) -> TransactionRequest:
    return TransactionRequest(
        source=player_account(player_id),
        destination=BANK,
        amount=amount,
        type=TransactionType.AUCTION,
        description=f"Auction purchase of {_money(amount)}",
    )


def account_name(game: Game, ref: AccountRef) -> str:
    if isinstance(ref, BankAccount):
        return "Bank"
    if isinstance(ref, PotAccount):
        return "Free Parking"
    if isinstance(ref, PlayerAccount):
        player = game.find_player(ref.player_id)
        return player.name if player is not None else "Unknown"
    return "Multiple"


def multiplayer_payout(
    game: Game,
    player_id: str,
    amount: int,
    direction: PayoutDirection,
) -> list[TransactionRequest]:
    """
    One payment between the selected player and every other player.

    Produces one request per other player in roster order, so the history
    shows each leg separately.
    """
    if game.find_player(player_id) is None:
        raise AccountNotFoundError(player_id)
    selected = player_account(player_id)
    others = [player_account(p.id) for p in game.players if p.id != player_id]
    if not others:
        raise InvalidTransactionError("a multi-player payout needs at least one other player")

    requests = []
    for other in others:
        source, destination = (other, selected) if direction == PayoutDirection.RECEIVING else (selected, other)
        requests.append(
            TransactionRequest(
                source=source,
                destination=destination,
                amount=amount,
                type=TransactionType.MULTIPLAYER_PAYOUT,
                description=(
                    f"Multi-player payout: {account_name(game, source)} paid {_money(amount)} "
                    f"to {account_name(game, destination)}"
                ),
            ),
        )
    return requests


def other_transaction(source: AccountRef, destination: AccountRef, amount: int) -> TransactionRequest:
    """Free-form transfer between any two accounts."""
    return TransactionRequest(
        source=source,
        destination=destination,
        amount=amount,
        type=TransactionType.OTHER,
        description=f"Custom transaction of {_money(amount)}",
    )


def add_to_pot(player_id: str, amount: int) -> TransactionRequest:
    return TransactionRequest(
        source=player_account(player_id),
        destination=POT,
        amount=amount,
        type=TransactionType.FREE_PARKING_ADD,
        description=f"Added {_money(amount)} to Free Parking",
    )
