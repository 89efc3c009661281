"""
String enum definitions for ledger concepts.
"""

from enum import Enum


class AccountKind(str, Enum):
    """Kinds of money sources and sinks a transaction can reference."""

    BANK = "bank"
    POT = "pot"
    PLAYER = "player"
    MULTIPLE = "multiple"  # terminal marker for distribute-on-removal records


class TransactionType(str, Enum):
    """Categories recorded in the transaction history."""

    PASS_GO = "pass_go"
    BONUS = "bonus"
    RENT = "rent"
    PROPERTY_PURCHASE = "property_purchase"
    HOUSE_PURCHASE = "house_purchase"
    SELL_HOUSES = "sell_houses"
    MORTGAGE = "mortgage"
    UNMORTGAGE = "unmortgage"
    JAIL_PAYMENT = "jail_payment"
    TAX_PAYMENT = "tax_payment"
    AUCTION = "auction"
    MULTIPLAYER_PAYOUT = "multiplayer_payout"
    OTHER = "other"
    FREE_PARKING_COLLECT = "free_parking_collect"
    FREE_PARKING_ADD = "free_parking_add"
    PLAYER_ADDED = "player_added"
    PLAYER_REMOVED = "player_removed"
    PLAYER_REMOVED_DISTRIBUTE = "player_removed_distribute"


class FreeParkingMode(str, Enum):
    """Which payments feed the Free Parking pot."""

    BASIC = "basic"  # jail fees and taxes only
    ALL_OUT = "all_out"  # also property, house and unmortgage payments


class HouseSellPercentage(int, Enum):
    """Share of the original cost refunded when selling houses back."""

    HALF = 50
    FULL = 100


class PayoutDirection(str, Enum):
    """Direction of a multi-player payout relative to the selected player."""

    RECEIVING = "receiving"  # every other player pays the selected player
    PAYING = "paying"  # the selected player pays every other player


class PlayerColor(str, Enum):
    """Player token colors, in palette order."""

    RED = "red"
    ORANGE = "orange"
    AMBER = "amber"
    YELLOW = "yellow"
    LIME = "lime"
    GREEN = "green"
    TEAL = "teal"
    CYAN = "cyan"
    SKY = "sky"
    BLUE = "blue"
    INDIGO = "indigo"
    PURPLE = "purple"
    FUCHSIA = "fuchsia"
    PINK = "pink"
    ROSE = "rose"
    BROWN = "brown"
    MAROON = "maroon"
    WHITE = "white"
    GRAY = "gray"
    BLACK = "black"


class LedgerErrorCode(str, Enum):
    """Error codes returned to clients for refused ledger operations."""

    INVALID_AMOUNT = "invalid_amount"
    ACCOUNT_NOT_FOUND = "account_not_found"
    INSUFFICIENT_RECIPIENTS = "insufficient_recipients"
    INVALID_TRANSACTION = "invalid_transaction"
    INVALID_PLAYER = "invalid_player"
    GAME_NOT_FOUND = "game_not_found"
    VALIDATION_ERROR = "validation_error"
