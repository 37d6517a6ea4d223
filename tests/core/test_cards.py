"""Tests for Card and Shoe classes."""

import pytest
from collections import Counter
from random import Random

from hypothesis import given, settings, strategies as st

from core.cards import CUT_CARD_FRACTION, Card, Rank, Shoe, Suit, full_deck


class TestCard:
    """Tests for the Card class."""

    def test_card_creation(self):
        """Test basic card creation."""
        card = Card(Rank.ACE, Suit.SPADES)
        assert card.rank == Rank.ACE
        assert card.suit == Suit.SPADES

    def test_card_value(self):
        """Test card blackjack values."""
        assert Card(Rank.ACE, Suit.SPADES).value == 11
        assert Card(Rank.TWO, Suit.SPADES).value == 2
        assert Card(Rank.NINE, Suit.HEARTS).value == 9
        assert Card(Rank.TEN, Suit.HEARTS).value == 10
        assert Card(Rank.JACK, Suit.DIAMONDS).value == 10
        assert Card(Rank.QUEEN, Suit.CLUBS).value == 10
        assert Card(Rank.KING, Suit.SPADES).value == 10

    def test_card_code(self):
        """Test the two-character wire code."""
        assert Card(Rank.TEN, Suit.SPADES).code == "TS"
        assert Card(Rank.ACE, Suit.HEARTS).code == "AH"
        assert str(Card(Rank.SEVEN, Suit.CLUBS)) == "7C"

    def test_card_immutable(self):
        """Test that cards are immutable."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(AttributeError):
            card.rank = Rank.KING

    def test_card_from_string(self):
        """Test parsing cards from strings."""
        assert Card.from_string("AS") == Card(Rank.ACE, Suit.SPADES)
        assert Card.from_string("Th") == Card(Rank.TEN, Suit.HEARTS)
        assert Card.from_string("10D") == Card(Rank.TEN, Suit.DIAMONDS)
        assert Card.from_string("kc") == Card(Rank.KING, Suit.CLUBS)

    @pytest.mark.parametrize("text", ["", "A", "1S", "AX", "ZZ"])
    def test_card_from_string_invalid(self, text):
        """Test rejecting malformed card strings."""
        with pytest.raises(ValueError):
            Card.from_string(text)

    def test_full_deck(self):
        """Test a deck holds each rank and suit pairing once."""
        deck = full_deck()
        assert len(deck) == 52
        assert len(set(deck)) == 52


class TestShoe:
    """Tests for the Shoe class."""

    def test_shoe_size(self, shoe):
        """Test a six-deck shoe holds 312 cards."""
        assert len(shoe) == 312
        assert shoe.total_cards == 312
        assert shoe.num_decks == 6
        assert shoe.cards_dealt == 0

    def test_shoe_composition(self, shoe):
        """Test every card appears exactly once per deck."""
        counts = Counter(shoe.cards)
        assert len(counts) == 52
        assert set(counts.values()) == {6}

    def test_cut_index(self, shoe):
        """Test the cut card sits at three quarters of the shoe."""
        assert shoe.cut_index == int(312 * CUT_CARD_FRACTION) == 234
        assert not shoe.needs_shuffle

    def test_draw(self, shoe):
        """Test drawing takes cards from the end."""
        expected = shoe.cards[-1]
        card = shoe.draw()
        assert card == expected
        assert shoe.cards_remaining == 311
        assert shoe.cards_dealt == 1

    def test_needs_shuffle_at_cut_card(self, shoe):
        """Test reaching the cut card flags the shoe."""
        for _ in range(shoe.cut_index - 1):
            shoe.draw()
        assert not shoe.needs_shuffle
        shoe.draw()
        assert shoe.needs_shuffle

    def test_penetration(self, shoe):
        """Test the display penetration tracks dealt cards."""
        assert shoe.penetration == pytest.approx(234 / (312 + 234))
        for _ in range(78):
            shoe.draw()
        assert shoe.penetration == pytest.approx(234 / (234 + 234))

    def test_draw_empty_shoe(self):
        """Test drawing from an exhausted shoe raises."""
        shoe = Shoe([], cut_index=0, num_decks=1)
        with pytest.raises(IndexError):
            shoe.draw()

    def test_same_seed_same_order(self):
        """Test shuffles are reproducible from the seed."""
        a = Shoe.build(2, Random(7))
        b = Shoe.build(2, Random(7))
        assert a.cards == b.cards

    def test_invalid_decks(self):
        """Test a shoe needs at least one deck."""
        with pytest.raises(ValueError):
            Shoe.build(0, Random(1))

    @given(
        num_decks=st.integers(min_value=1, max_value=8),
        seed=st.integers(min_value=0, max_value=2**32),
        draws=st.integers(min_value=0, max_value=52),
    )
    @settings(max_examples=50)
    def test_drawn_cards_come_from_the_shoe(self, num_decks, seed, draws):
        """Test dealt and remaining cards together are exactly the built decks."""
        shoe = Shoe.build(num_decks, Random(seed))
        dealt = [shoe.draw() for _ in range(draws)]

        counts = Counter(dealt) + Counter(shoe.cards)
        assert sum(counts.values()) == num_decks * 52
        assert all(counts[card] == num_decks for card in full_deck())
        assert shoe.cards_dealt == draws
