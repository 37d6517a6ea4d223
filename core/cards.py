"""Card and Shoe classes - immutable card representations."""

from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Iterator

# Fraction of the shoe dealt before the cut card comes out
CUT_CARD_FRACTION = 0.75


class Suit(Enum):
    """Card suits."""

    SPADES = "S"
    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    """Card ranks keyed by their single-character symbol."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "T"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        if self.value in "TJQK":
            return 10
        return int(self.value)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def code(self) -> str:
        """Two-character wire code, e.g. 'TS' or 'AH'."""
        return f"{self.rank.value}{self.suit.value}"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like 'AS', 'Th' or '10D'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]
        if rank_str == "10":
            rank_str = "T"

        try:
            rank = Rank(rank_str)
        except ValueError:
            raise ValueError(f"Invalid rank: {rank_str}") from None
        try:
            suit = Suit(suit_str)
        except ValueError:
            raise ValueError(f"Invalid suit: {suit_str}") from None

        return cls(rank, suit)


def full_deck() -> list[Card]:
    """Return the 52 cards of one deck in a fixed order."""
    return [Card(rank, suit) for rank in Rank for suit in Suit]


class Shoe:
    """
    A multi-deck shoe with a cut card.

    Cards are drawn from the end of the list. The shoe never rebuilds
    itself: the table decides when a fresh shoe is needed.
    """

    def __init__(self, cards: list[Card], cut_index: int, num_decks: int) -> None:
        """
        Wrap an already ordered card sequence.

        Args:
            cards: Remaining cards, draw end last
            cut_index: Draw count at which the cut card is reached
            num_decks: Number of decks the shoe was built from
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")
        self._cards = cards
        self._cut_index = cut_index
        self._num_decks = num_decks

    @classmethod
    def build(cls, num_decks: int, rng: Random) -> "Shoe":
        """
        Build and shuffle a fresh shoe.

        Args:
            num_decks: Number of decks in the shoe (typically 6 or 8)
            rng: Seeded random number generator driving the shuffle
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")
        cards = [card for _ in range(num_decks) for card in full_deck()]
        # Random.shuffle is an in-place Fisher-Yates
        rng.shuffle(cards)
        return cls(cards, int(len(cards) * CUT_CARD_FRACTION), num_decks)

    def draw(self) -> Card:
        """Draw a card from the shoe."""
        if not self._cards:
            raise IndexError("Cannot draw from empty shoe")
        return self._cards.pop()

    @property
    def needs_shuffle(self) -> bool:
        """Check if the cut card has been reached."""
        return self.cards_dealt >= self._cut_index

    @property
    def penetration(self) -> float:
        """Display fraction derived from the cut index and remaining cards."""
        denominator = len(self._cards) + self._cut_index
        if denominator == 0:
            return 0.0
        return self._cut_index / denominator

    @property
    def cut_index(self) -> int:
        """Return the draw count at which the cut card is reached."""
        return self._cut_index

    @property
    def cards(self) -> list[Card]:
        """Return the remaining cards, draw end last."""
        return self._cards

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def cards_dealt(self) -> int:
        """Return the number of cards dealt."""
        return self.total_cards - len(self._cards)

    @property
    def total_cards(self) -> int:
        """Return the total number of cards in a full shoe."""
        return self._num_decks * 52

    @property
    def num_decks(self) -> int:
        """Return the number of decks in the shoe."""
        return self._num_decks

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
