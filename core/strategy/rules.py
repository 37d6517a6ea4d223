"""Blackjack table rules."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RuleSet:
    """
    Blackjack table rules configuration.

    Fixed when a table is created and never mutated afterwards.
    """

    # Deck configuration
    num_decks: int = 6

    # Betting limits
    min_bet: int = 10

    # Dealer rules
    dealer_hits_soft_17: bool = True  # H17 vs S17

    # Blackjack payout (3:2 = 1.5, 6:5 = 1.2)
    blackjack_payout: float = 1.5

    # Double down rules
    double_after_split: bool = True  # DAS

    # Split rules
    resplit_limit: int = 3  # Extra hands a player may split into

    # Surrender rules
    surrender_allowed: bool = True

    # Peek rules (dealer checks for blackjack)
    dealer_peeks: bool = True  # US rules (ENHC = European No Hole Card if False)

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks < 1 or self.num_decks > 8:
            raise ValueError("num_decks must be between 1 and 8")
        if self.blackjack_payout < 1.0:
            raise ValueError("blackjack_payout must be at least 1.0")
        if self.resplit_limit < 0:
            raise ValueError("resplit_limit cannot be negative")
        if self.min_bet < 1:
            raise ValueError("min_bet must be at least 1")

    @property
    def max_hands(self) -> int:
        """Maximum number of hands one player can hold after splitting."""
        return self.resplit_limit + 1
