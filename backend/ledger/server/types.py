"""Request and response models for the ledger HTTP API."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter

from ledger.logic.enums import PayoutDirection, PlayerColor
from ledger.logic.game import NewPlayer  # noqa: TC001
from ledger.logic.settings import DEFAULT_STARTING_MONEY, GameSettings
from ledger.logic.types import AccountRef  # noqa: TC001


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CreateGameRequest(_Request):
    name: str = ""
    players: list[NewPlayer] = Field(min_length=1)
    starting_money: StrictInt = Field(default=DEFAULT_STARTING_MONEY, ge=0)
    settings: GameSettings = Field(default_factory=GameSettings)


class AddPlayerRequest(_Request):
    name: str = Field(min_length=1, max_length=100)
    color: PlayerColor | None = None
    starting_money: StrictInt = Field(ge=0)


class RemovePlayerRequest(_Request):
    # None: regular dropout, money returns to the bank
    distribute_to: list[str] | None = None


class UpdateNotesRequest(_Request):
    notes: str = Field(default="", max_length=10000)


class GameSummary(BaseModel):
    id: str
    name: str
    player_count: int
    free_parking_pot: int
    updated_date: datetime


# --- Table actions (discriminated by "action") ---


class PassGoAction(_Request):
    action: Literal["pass_go"]
    player_id: str


class BonusAction(_Request):
    action: Literal["bonus"]
    player_id: str
    amount: StrictInt


class RentAction(_Request):
    action: Literal["rent"]
    payer_id: str
    receiver_id: str
    amount: StrictInt


class PropertyPurchaseAction(_Request):
    action: Literal["property_purchase"]
    player_id: str
    amount: StrictInt


class HousePurchaseAction(_Request):
    action: Literal["house_purchase"]
    player_id: str
    unit_cost: StrictInt
    quantity: StrictInt = 1


class SellHousesAction(_Request):
    action: Literal["sell_houses"]
    player_id: str
    unit_cost: StrictInt
    quantity: StrictInt = 1


class MortgageAction(_Request):
    action: Literal["mortgage"]
    player_id: str
    amount: StrictInt


class UnmortgageAction(_Request):
    action: Literal["unmortgage"]
    player_id: str
    amount: StrictInt


class JailPaymentAction(_Request):
    action: Literal["jail_payment"]
    player_id: str


class TaxPaymentAction(_Request):
    action: Literal["tax_payment"]
    player_id: str
    amount: StrictInt


class AuctionAction(_Request):
    action: Literal["auction"]
    player_id: str
    amount: StrictInt


class MultiplayerPayoutAction(_Request):
    action: Literal["multiplayer_payout"]
    player_id: str
    amount: StrictInt
    direction: PayoutDirection


class OtherAction(_Request):
    action: Literal["other"]
    source: AccountRef
    destination: AccountRef
    amount: StrictInt


class FreeParkingAddAction(_Request):
    action: Literal["free_parking_add"]
    player_id: str
    amount: StrictInt


class FreeParkingCollectAction(_Request):
    action: Literal["free_parking_collect"]
    player_id: str


TableAction = Annotated[
    PassGoAction
    | BonusAction
    | RentAction
    | PropertyPurchaseAction
    | HousePurchaseAction
    | SellHousesAction
    | MortgageAction
    | UnmortgageAction
    | JailPaymentAction
    | TaxPaymentAction
    | AuctionAction
    | MultiplayerPayoutAction
    | OtherAction
    | FreeParkingAddAction
    | FreeParkingCollectAction,
    Field(discriminator="action"),
]

table_action_adapter: TypeAdapter[TableAction] = TypeAdapter(TableAction)
