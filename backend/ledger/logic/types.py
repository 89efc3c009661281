"""
Account reference types shared by state, engine and the HTTP layer.

An account reference is a closed tagged union discriminated by ``kind``.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from ledger.logic.enums import AccountKind


class BankAccount(BaseModel):
    """The bank: unlimited supply, balance never tracked."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[AccountKind.BANK] = AccountKind.BANK


class PotAccount(BaseModel):
    """The shared Free Parking pot."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[AccountKind.POT] = AccountKind.POT


class PlayerAccount(BaseModel):
    """A single player's cash."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[AccountKind.PLAYER] = AccountKind.PLAYER
    player_id: str = Field(min_length=1)


class MultipleAccount(BaseModel):
    """Marker destination for wealth split between several players. Never resolves."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[AccountKind.MULTIPLE] = AccountKind.MULTIPLE


AccountRef = Annotated[
    BankAccount | PotAccount | PlayerAccount | MultipleAccount,
    Field(discriminator="kind"),
]

account_ref_adapter: TypeAdapter[AccountRef] = TypeAdapter(AccountRef)

BANK = BankAccount()
POT = PotAccount()
MULTIPLE = MultipleAccount()


def player_account(player_id: str) -> PlayerAccount:
    return PlayerAccount(player_id=player_id)


def account_label(ref: BankAccount | PotAccount | PlayerAccount | MultipleAccount) -> str:
    """Short human-readable label used in log lines."""
    if isinstance(ref, PlayerAccount):
        return f"player:{ref.player_id}"
    return ref.kind.value
