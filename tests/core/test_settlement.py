"""Tests for end-of-round payouts."""

import pytest

from core.cards import Card
from core.game.settlement import hand_payout, settle_hands, settlement_credit
from core.hand import score
from core.strategy import RuleSet


def _score(*codes):
    return score(Card.from_string(c) for c in codes)


class TestHandPayout:
    """Tests for hand_payout."""

    def test_natural_pays_three_to_two(self, blackjack_hand, rules):
        """Test a natural against a non-natural dealer pays 3:2."""
        assert hand_payout(blackjack_hand, _score("TS", "9H"), rules) == 75

    def test_natural_six_to_five(self, blackjack_hand):
        """Test the payout follows the table ratio."""
        rules = RuleSet(blackjack_payout=1.2)
        assert hand_payout(blackjack_hand, _score("TS", "9H"), rules) == 60

    def test_natural_against_dealer_natural(self, blackjack_hand, rules):
        """Test two naturals push."""
        assert hand_payout(blackjack_hand, _score("AD", "KD"), rules) == 0

    def test_natural_beats_dealer_21(self, blackjack_hand, rules):
        """Test a natural beats a multi-card dealer 21."""
        assert hand_payout(blackjack_hand, _score("7S", "7H", "7D"), rules) == 75

    def test_bust_loses_even_if_dealer_busts(self, hand_of, rules):
        """Test a busted player loses regardless of the dealer."""
        hand = hand_of("TS", "6H", "KC", bet=50)
        assert hand_payout(hand, _score("TD", "6D", "9D"), rules) == -50

    def test_dealer_bust(self, hand_of, rules):
        """Test a standing hand wins when the dealer busts."""
        hand = hand_of("TS", "2H", bet=50)
        assert hand_payout(hand, _score("TD", "6D", "9D"), rules) == 50

    def test_dealer_natural_beats_21(self, hand_of, rules):
        """Test a dealer natural beats a three-card 21."""
        hand = hand_of("7S", "7H", "7C", bet=50)
        assert hand_payout(hand, _score("AD", "KD"), rules) == -50

    def test_split_21_is_not_natural(self, hand_of, rules):
        """Test a split two-card 21 is paid as an ordinary 21."""
        hand = hand_of("AS", "KH", bet=50, split=True)
        assert hand_payout(hand, _score("TS", "9H"), rules) == 50
        assert hand_payout(hand, _score("TS", "AH", "KC"), rules) == 0

    @pytest.mark.parametrize(
        "player,dealer,expected",
        [
            (("TS", "9H"), ("TD", "8D"), 50),
            (("TS", "7H"), ("TD", "8D"), -50),
            (("TS", "8H"), ("TD", "8D"), 0),
        ],
    )
    def test_compare_totals(self, hand_of, rules, player, dealer, expected):
        """Test the higher total wins and equal totals push."""
        hand = hand_of(*player, bet=50)
        assert hand_payout(hand, _score(*dealer), rules) == expected


class TestSettlementCredit:
    """Tests for settlement_credit."""

    def test_win(self):
        assert settlement_credit(50, 50) == 100

    def test_push_returns_exactly_the_bet(self):
        assert settlement_credit(50, 0) == 50

    def test_loss(self):
        assert settlement_credit(50, -50) == 0

    def test_blackjack(self):
        assert settlement_credit(50, 75) == 125


class TestSettleHands:
    """Tests for settle_hands."""

    def test_surrendered_hands_skipped(self, hand_of, rules):
        """Test surrendered hands were refunded already and are not scored."""
        kept = hand_of("TS", "9H", bet=50)
        gone = hand_of("TS", "6H", bet=50)
        gone.surrendered = True
        dealer = [Card.from_string(c) for c in ("TD", "8D")]

        results = settle_hands([("alice", kept), ("bob", gone)], dealer, rules)

        assert len(results) == 1
        assert results[0].player_id == "alice"
        assert results[0].hand_id == kept.id
        assert results[0].payout == 50
        assert results[0].credit == 100

    def test_hands_not_modified(self, hand_of, rules):
        """Test settling only reports results."""
        hand = hand_of("TS", "9H", bet=50)
        dealer = [Card.from_string(c) for c in ("TD", "8D")]
        settle_hands([("alice", hand)], dealer, rules)
        assert not hand.settled
        assert hand.bet == 50
