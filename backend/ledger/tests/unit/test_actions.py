"""Unit tests for the transaction builders behind each table action."""

import pytest

from ledger.logic import actions
from ledger.logic.engine import apply_transactions
from ledger.logic.enums import PayoutDirection, TransactionType
from ledger.logic.exceptions import AccountNotFoundError, InvalidAmountError, InvalidTransactionError
from ledger.logic.settings import GameSettings
from ledger.logic.types import BANK, POT, player_account
from ledger.tests.helpers import ALL_OUT_RULES, POT_RULES, balances, make_game


class TestBankPayments:
    def test_pass_go(self):
        request = actions.pass_go("alice")
        assert request.source == BANK
        assert request.destination == player_account("alice")
        assert request.amount == 200
        assert request.type == TransactionType.PASS_GO
        assert request.description == "Passed GO - collected $200"

    def test_bonus_and_mortgage_come_from_bank(self):
        assert actions.bonus("bob", 100).source == BANK
        mortgage = actions.mortgage("bob", 1500)
        assert mortgage.source == BANK
        assert mortgage.description == "Mortgaged property for $1,500"

    def test_auction_always_pays_bank(self):
        assert actions.auction("carol", 80).destination == BANK

    def test_rent_between_players(self):
        request = actions.pay_rent("alice", "bob", 26)
        assert request.source == player_account("alice")
        assert request.destination == player_account("bob")
        assert request.type == TransactionType.RENT


class TestRuleRoutedPayments:
    def test_tax_goes_to_pot_when_free_parking_is_on(self):
        assert actions.pay_tax(POT_RULES, "alice", 200).destination == POT
        assert actions.pay_tax(GameSettings(), "alice", 200).destination == BANK

    def test_jail_fee_uses_configured_amount(self):
        settings = POT_RULES.model_copy(update={"jail_fee": 75})
        request = actions.pay_jail_fee(settings, "bob")
        assert request.amount == 75
        assert request.destination == POT
        assert request.description == "Jail fee payment of $75"

    def test_purchases_feed_pot_only_in_all_out_mode(self):
        assert actions.purchase_property(POT_RULES, "alice", 200).destination == BANK
        assert actions.purchase_property(ALL_OUT_RULES, "alice", 200).destination == POT
        assert actions.unmortgage(ALL_OUT_RULES, "alice", 110).destination == POT

    def test_house_purchase_totals_unit_cost(self):
        request = actions.purchase_houses(GameSettings(), "alice", 50, 3)
        assert request.amount == 150
        assert request.description == "Purchased 3 houses/hotels for $150"

    def test_house_purchase_needs_a_quantity(self):
        with pytest.raises(InvalidAmountError):
            actions.purchase_houses(GameSettings(), "alice", 50, 0)


class TestSellHouses:
    def test_half_price_by_default(self):
        request = actions.sell_houses(GameSettings(), "bob", 100, 3)
        assert request.source == BANK
        assert request.amount == 150
        assert request.description == "Sold 3 houses/hotels for $150 (50% of cost)"

    def test_full_price_rule(self):
        request = actions.sell_houses(GameSettings(house_sell_percentage=100), "bob", 200, 1)
        assert request.amount == 200
        assert request.description == "Sold 1 house/hotel for $200 (100% of cost)"


class TestMultiplayerPayout:
    def test_receiving_collects_from_every_other_player(self):
        game = make_game()
        requests = actions.multiplayer_payout(game, "alice", 10, PayoutDirection.RECEIVING)
        assert [r.source for r in requests] == [player_account("bob"), player_account("carol")]
        assert all(r.destination == player_account("alice") for r in requests)
        assert requests[0].description == "Multi-player payout: Bob paid $10 to Alice"

        result = apply_transactions(game, requests)
        assert balances(result) == {"alice": 1520, "bob": 1490, "carol": 1490}
        assert len(result.transaction_history) == 2

    def test_paying_sends_to_every_other_player(self):
        game = make_game("Alice", "Bob", "Carol", "Dan")
        requests = actions.multiplayer_payout(game, "bob", 50, PayoutDirection.PAYING)
        assert len(requests) == 3
        result = apply_transactions(game, requests)
        assert balances(result)["bob"] == 1350
        assert result.total_money == game.total_money

    def test_unknown_player(self):
        with pytest.raises(AccountNotFoundError):
            actions.multiplayer_payout(make_game(), "zed", 10, PayoutDirection.PAYING)

    def test_needs_another_player(self):
        game = make_game("Alice", "Bob")
        game = game.model_copy(update={"players": game.players[:1]})
        with pytest.raises(InvalidTransactionError, match="other player"):
            actions.multiplayer_payout(game, "alice", 10, PayoutDirection.PAYING)


class TestOtherAndPot:
    def test_other_transaction_between_any_accounts(self):
        request = actions.other_transaction(POT, player_account("carol"), 40)
        assert request.type == TransactionType.OTHER
        assert request.description == "Custom transaction of $40"

    def test_add_to_pot(self):
        request = actions.add_to_pot("alice", 100)
        assert request.destination == POT
        assert request.type == TransactionType.FREE_PARKING_ADD

    def test_account_names(self):
        game = make_game()
        assert actions.account_name(game, BANK) == "Bank"
        assert actions.account_name(game, POT) == "Free Parking"
        assert actions.account_name(game, player_account("carol")) == "Carol"
        assert actions.account_name(game, player_account("zed")) == "Unknown"
