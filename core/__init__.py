"""Core blackjack table engine - 100% transport-agnostic."""

from core.cards import Card, Shoe, Rank, Suit
from core.hand import Hand, Score, score

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "Hand",
    "Score",
    "score",
]
