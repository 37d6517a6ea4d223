"""End-of-round payout arithmetic."""

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal

from core.cards import Card
from core.hand import Hand, Score, score
from core.strategy.rules import RuleSet


@dataclass(frozen=True)
class HandResult:
    """Outcome of one hand against the dealer."""

    player_id: str
    hand_id: str
    payout: int  # Net win (+) or loss (-) relative to the bet
    credit: int  # Chips returned to the player at settlement


def hand_payout(hand: Hand, dealer: Score, rules: RuleSet) -> int:
    """
    Net payout of a hand against the final dealer score.

    Returns:
        Positive for a win, negative for a loss, 0 for a push
    """
    player = hand.score

    if hand.is_natural and not dealer.is_blackjack:
        amount = Decimal(hand.bet) * Decimal(str(rules.blackjack_payout))
        return int(amount.to_integral_value(rounding=ROUND_FLOOR))

    # Player busts always loses
    if player.is_bust:
        return -hand.bet

    # Dealer busts, player wins
    if dealer.is_bust:
        return hand.bet

    # Dealer natural beats any non-natural 21
    if dealer.is_blackjack and not hand.is_natural:
        return -hand.bet

    if player.total > dealer.total:
        return hand.bet
    if player.total < dealer.total:
        return -hand.bet
    return 0  # Push


def settlement_credit(bet: int, payout: int) -> int:
    """Chips credited back: the bet plus winnings, nothing on a loss."""
    return max(0, bet + payout)


def settle_hands(
    hands: list[tuple[str, Hand]],
    dealer_cards: list[Card],
    rules: RuleSet,
) -> list[HandResult]:
    """
    Score every hand once against the dealer.

    Surrendered hands were refunded when they surrendered and are skipped.
    The hands are not modified; the caller applies the credits.

    Args:
        hands: (player_id, hand) pairs in table order
        dealer_cards: Final dealer cards
        rules: Table rules

    Returns:
        One result per non-surrendered hand
    """
    dealer = score(dealer_cards)
    results = []
    for player_id, hand in hands:
        if hand.surrendered:
            continue
        payout = hand_payout(hand, dealer, rules)
        results.append(
            HandResult(
                player_id=player_id,
                hand_id=hand.id,
                payout=payout,
                credit=settlement_credit(hand.bet, payout),
            )
        )
    return results
