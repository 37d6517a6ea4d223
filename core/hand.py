"""Hand scoring for blackjack."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator
from uuid import uuid4

from core.cards import Card

if TYPE_CHECKING:
    from core.strategy.rules import RuleSet


@dataclass(frozen=True, slots=True)
class Score:
    """Evaluated blackjack total of a set of cards."""

    total: int
    soft: bool
    is_blackjack: bool
    is_bust: bool


def card_value(card: Card) -> int:
    """Return the point value of a card, counting an Ace as 11."""
    return card.value


def score(cards: Iterable[Card]) -> Score:
    """
    Score a set of cards.

    Aces start at 11 and are demoted to 1 one at a time while the
    total is over 21.
    """
    cards = list(cards)
    total = 0
    aces = 0

    for card in cards:
        if card.is_ace:
            aces += 1
        total += card_value(card)

    # Reduce aces from 11 to 1 as needed
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    return Score(
        total=total,
        soft=aces > 0 and total <= 21,
        is_blackjack=len(cards) == 2 and total == 21,
        is_bust=total > 21,
    )


def can_split(cards: Iterable[Card]) -> bool:
    """Check if the cards are a pair (two cards of the same rank)."""
    cards = list(cards)
    return len(cards) == 2 and cards[0].rank == cards[1].rank


def dealer_should_hit(cards: Iterable[Card], rules: "RuleSet") -> bool:
    """Determine if the dealer draws another card."""
    s = score(cards)
    if s.total < 17:
        return True
    if s.total == 17 and s.soft:
        return rules.dealer_hits_soft_17
    return False


def new_hand_id() -> str:
    """Return a fresh hand identifier."""
    return uuid4().hex


@dataclass
class Hand:
    """A player's hand for one round."""

    id: str = field(default_factory=new_hand_id)
    cards: list[Card] = field(default_factory=list)
    bet: int = 0
    settled: bool = False
    doubled: bool = False
    split: bool = False
    surrendered: bool = False

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def settle(self) -> None:
        """Mark the hand as finished for this round."""
        self.settled = True

    @property
    def score(self) -> Score:
        """Return the current score of the hand."""
        return score(self.cards)

    @property
    def value(self) -> int:
        """Return the best total of the hand."""
        return self.score.total

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.score.is_bust

    @property
    def is_natural(self) -> bool:
        """Two-card 21 that did not come from a split."""
        return self.score.is_blackjack and not self.split

    @property
    def is_pair(self) -> bool:
        """Check if the hand is a pair (two cards of same rank)."""
        return can_split(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        s = self.score
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({s.total})"
        if s.soft:
            value_str = f"(soft {s.total})"
        if self.is_natural:
            value_str = "(BLACKJACK)"
        if s.is_bust:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, bet={self.bet}, settled={self.settled})"
