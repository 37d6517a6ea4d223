"""Basic strategy advisor used to drive automated players."""

from enum import Enum, auto
from functools import lru_cache
from typing import Mapping

from core.cards import Card
from core.hand import Hand, score
from core.strategy.rules import RuleSet


class Action(Enum):
    """Possible player actions."""

    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()
    SURRENDER = auto()

    # Conditional actions (fallback if primary not allowed)
    DOUBLE_OR_HIT = auto()  # Double if allowed, else hit
    DOUBLE_OR_STAND = auto()  # Double if allowed, else stand
    SURRENDER_OR_HIT = auto()  # Surrender if allowed, else hit
    SURRENDER_OR_SPLIT = auto()  # Surrender if allowed, else split

    def __str__(self) -> str:
        return self.name.lower()


# Dealer upcards: 2..10, 11 = Ace
UPCARDS = range(2, 12)


class BasicStrategy:
    """
    Basic strategy lookup tables.

    Keys are (total, dealer upcard); pair keys use the card value of
    the pair (11 for Aces). Tables depend on H17/S17, DAS and surrender.
    """

    def __init__(self, rules: RuleSet | None = None) -> None:
        self.rules = rules or RuleSet()
        self._hard_table = self._build_hard_table()
        self._soft_table = self._build_soft_table()
        self._pair_table = self._build_pair_table()

    def get_action(
        self,
        player_total: int,
        dealer_upcard: int,
        is_soft: bool = False,
        pair_rank: int | None = None,
        can_double: bool = True,
        can_surrender: bool = True,
        can_split: bool = True,
    ) -> Action:
        """
        Get the basic strategy action.

        Args:
            player_total: Player's hand total
            dealer_upcard: Dealer's upcard value (2-11, Ace=11)
            is_soft: Whether the hand is soft
            pair_rank: Card value of the pair, None if the hand is not a pair
            can_double: Whether doubling is allowed
            can_surrender: Whether surrender is allowed
            can_split: Whether splitting is allowed

        Returns:
            A concrete action (never a conditional one)
        """
        if pair_rank is not None and can_split:
            action = self._pair_table.get((pair_rank, dealer_upcard))
            if action:
                return self._resolve_action(action, can_double, can_surrender, can_split)

        table = self._soft_table if is_soft else self._hard_table
        action = table.get((player_total, dealer_upcard))
        if action:
            return self._resolve_action(action, can_double, can_surrender, can_split=False)

        if player_total >= 17:
            return Action.STAND
        return Action.HIT

    def _resolve_action(
        self,
        action: Action,
        can_double: bool,
        can_surrender: bool,
        can_split: bool,
    ) -> Action:
        """Resolve conditional actions based on what's allowed."""
        if action == Action.DOUBLE_OR_HIT:
            return Action.DOUBLE if can_double else Action.HIT
        if action == Action.DOUBLE_OR_STAND:
            return Action.DOUBLE if can_double else Action.STAND
        if action == Action.SURRENDER_OR_HIT:
            return Action.SURRENDER if can_surrender else Action.HIT
        if action == Action.SURRENDER_OR_SPLIT:
            return Action.SURRENDER if can_surrender else Action.SPLIT
        if action == Action.SPLIT and not can_split:
            return Action.HIT
        return action

    def _build_hard_table(self) -> Mapping[tuple[int, int], Action]:
        """Build hard totals strategy table."""
        H = Action.HIT
        S = Action.STAND
        D = Action.DOUBLE_OR_HIT
        Rh = Action.SURRENDER_OR_HIT

        table: dict[tuple[int, int], Action] = {}

        for total in range(4, 9):
            for dealer in UPCARDS:
                table[(total, dealer)] = H

        for dealer in UPCARDS:
            table[(9, dealer)] = D if dealer in (3, 4, 5, 6) else H
            table[(10, dealer)] = D if dealer <= 9 else H
            table[(11, dealer)] = D

        # Hard 12 stands only against 4-6
        for dealer in UPCARDS:
            table[(12, dealer)] = S if dealer in (4, 5, 6) else H

        for total in range(13, 17):
            for dealer in UPCARDS:
                table[(total, dealer)] = S if dealer <= 6 else H

        if self.rules.surrender_allowed:
            table[(15, 10)] = Rh
            table[(16, 9)] = Rh
            table[(16, 10)] = Rh
            table[(16, 11)] = Rh
            if self.rules.dealer_hits_soft_17:
                table[(15, 11)] = Rh

        for total in range(17, 22):
            for dealer in UPCARDS:
                table[(total, dealer)] = S

        return table

    def _build_soft_table(self) -> Mapping[tuple[int, int], Action]:
        """Build soft totals strategy table."""
        H = Action.HIT
        S = Action.STAND
        D = Action.DOUBLE_OR_HIT
        Ds = Action.DOUBLE_OR_STAND

        # Upcards a soft total doubles against
        double_against = {
            13: (5, 6),
            14: (5, 6),
            15: (4, 5, 6),
            16: (4, 5, 6),
            17: (3, 4, 5, 6),
        }

        table: dict[tuple[int, int], Action] = {}

        for total, doubles in double_against.items():
            for dealer in UPCARDS:
                table[(total, dealer)] = D if dealer in doubles else H

        # Soft 18 (A,7)
        for dealer in UPCARDS:
            if dealer <= 6:
                table[(18, dealer)] = Ds
            elif dealer <= 8:
                table[(18, dealer)] = S
            else:
                table[(18, dealer)] = H
        if not self.rules.dealer_hits_soft_17:
            table[(18, 2)] = S

        for total in (19, 20, 21):
            for dealer in UPCARDS:
                table[(total, dealer)] = S
        if self.rules.dealer_hits_soft_17:
            table[(19, 6)] = Ds

        return table

    def _build_pair_table(self) -> Mapping[tuple[int, int], Action]:
        """Build pair splitting strategy table."""
        H = Action.HIT
        S = Action.STAND
        P = Action.SPLIT
        D = Action.DOUBLE_OR_HIT
        Rp = Action.SURRENDER_OR_SPLIT
        das = self.rules.double_after_split

        table: dict[tuple[int, int], Action] = {}

        for dealer in UPCARDS:
            # 2s and 3s
            if dealer in (2, 3):
                low = P if das else H
            elif dealer <= 7:
                low = P
            else:
                low = H
            table[(2, dealer)] = low
            table[(3, dealer)] = low

            table[(4, dealer)] = P if das and dealer in (5, 6) else H
            table[(5, dealer)] = D if dealer <= 9 else H

            if dealer == 2:
                table[(6, dealer)] = P if das else H
            else:
                table[(6, dealer)] = P if dealer <= 6 else H

            table[(7, dealer)] = P if dealer <= 7 else H
            table[(8, dealer)] = P
            table[(9, dealer)] = S if dealer in (7, 10, 11) else P
            table[(10, dealer)] = S
            table[(11, dealer)] = P

        if self.rules.surrender_allowed and self.rules.dealer_hits_soft_17:
            table[(8, 11)] = Rp

        return table

    @property
    def hard_table(self) -> Mapping[tuple[int, int], Action]:
        """Return the hard totals strategy table."""
        return self._hard_table

    @property
    def soft_table(self) -> Mapping[tuple[int, int], Action]:
        """Return the soft totals strategy table."""
        return self._soft_table

    @property
    def pair_table(self) -> Mapping[tuple[int, int], Action]:
        """Return the pair splitting strategy table."""
        return self._pair_table


@lru_cache(maxsize=32)
def strategy_for(rules: RuleSet) -> BasicStrategy:
    """Return the (cached) strategy tables for a rule set."""
    return BasicStrategy(rules)


def advise(hand: Hand, dealer_upcard: Card, rules: RuleSet, bankroll: int) -> Action:
    """
    Recommend an action for a hand.

    Args:
        hand: The hand to play
        dealer_upcard: The dealer's face-up card
        rules: Table rules
        bankroll: Chips the player still has behind the bet

    Returns:
        HIT, STAND, DOUBLE, SPLIT or SURRENDER
    """
    s = score(hand.cards)
    two_cards = len(hand.cards) == 2
    affordable = bankroll >= hand.bet

    pair_rank = hand.cards[0].value if hand.is_pair else None
    can_split = pair_rank is not None and affordable

    return strategy_for(rules).get_action(
        player_total=s.total,
        dealer_upcard=dealer_upcard.value,
        is_soft=s.soft,
        pair_rank=pair_rank,
        can_double=two_cards and affordable and (rules.double_after_split or not hand.split),
        can_surrender=two_cards and rules.surrender_allowed and not hand.split,
        can_split=can_split,
    )
