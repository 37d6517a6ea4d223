"""Pytest fixtures for blackjack table tests."""

import pytest
from random import Random

from core.cards import Card, Shoe, full_deck
from core.game import TableMachine, new_table
from core.hand import Hand
from core.strategy import BasicStrategy, RuleSet


def _cards(*codes: str) -> list[Card]:
    return [Card.from_string(c) for c in codes]


@pytest.fixture
def hand_of():
    """Factory building a hand from wire codes, e.g. hand_of("AS", "TH", bet=50)."""

    def build(*codes: str, bet: int = 0, split: bool = False) -> Hand:
        return Hand(cards=_cards(*codes), bet=bet, split=split)

    return build


@pytest.fixture
def stacked():
    """
    Factory building a shoe whose next draws are exactly the given codes.

    A fixed-order filler sits underneath so a round never runs dry.
    """

    def build(*draws: str, num_decks: int = 6) -> Shoe:
        filler = [card for _ in range(num_decks) for card in full_deck()]
        ordered = filler + list(reversed(_cards(*draws)))
        return Shoe(ordered, cut_index=int(num_decks * 52 * 0.75), num_decks=num_decks)

    return build


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def rules():
    """Default ruleset."""
    return RuleSet()


@pytest.fixture
def stand_17_rules():
    """Dealer stands on soft 17."""
    return RuleSet(dealer_hits_soft_17=False)


@pytest.fixture
def basic_strategy(rules):
    """Basic strategy for default rules."""
    return BasicStrategy(rules)


@pytest.fixture
def shoe(rng):
    """A shuffled 6-deck shoe."""
    return Shoe.build(6, rng)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand(hand_of):
    """A natural blackjack hand."""
    return hand_of("AS", "KH", bet=50)


@pytest.fixture
def soft_17_hand(hand_of):
    """A soft 17 hand (A-6)."""
    return hand_of("AS", "6H")


@pytest.fixture
def hard_16_hand(hand_of):
    """A hard 16 hand (10-6)."""
    return hand_of("TS", "6H")


@pytest.fixture
def pair_8s_hand(hand_of):
    """A pair of 8s hand."""
    return hand_of("8S", "8H", bet=50)


@pytest.fixture
def bust_hand(hand_of):
    """A busted hand."""
    return hand_of("TS", "6H", "KC")


@pytest.fixture
def table(rules, rng):
    """An empty table in the betting phase."""
    return new_table("table-1", rules, rng)


@pytest.fixture
def machine(table, rng):
    """Engine around the empty table with Alice in seat 0."""
    m = TableMachine(table, rng=rng)
    m.seat_player("alice", "Alice", 1000)
    return m
