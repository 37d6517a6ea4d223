"""Player-facing snapshot of a table (hides the dealer's hole card)."""

from dataclasses import dataclass

from core.game.state import Phase
from core.game.table import (
    Player,
    TableState,
    double_allowed,
    split_allowed,
    surrender_allowed,
)
from core.hand import Hand


@dataclass(frozen=True)
class TurnView:
    player_id: str
    hand_id: str


@dataclass(frozen=True)
class PlayerView:
    id: str
    name: str
    seat: int
    chips: int
    is_you: bool
    is_bot: bool


@dataclass(frozen=True)
class HandView:
    id: str
    cards: list[str]
    total: int
    soft: bool
    bet: int
    can_split: bool
    can_double: bool
    can_surrender: bool
    is_bust: bool
    is_blackjack: bool
    is_active: bool
    is_settled: bool


@dataclass(frozen=True)
class DealerView:
    upcard: str | None
    hole_revealed: bool
    cards: list[str]
    total: int | None


@dataclass(frozen=True)
class TableView:
    session_id: str
    code: str | None
    shoe_size: int
    cut_card_penetration: float
    round: int
    dealer: DealerView
    players: list[PlayerView]
    hands: dict[str, list[HandView]]
    turn: TurnView | None
    phase: str
    you: PlayerView | None


def _dealer_view(table: TableState) -> DealerView:
    cards = table.dealer.cards
    upcard = cards[0].code if cards else None
    # The hole card only shows once the round is settled
    if table.phase == Phase.SETTLING and cards:
        return DealerView(
            upcard=upcard,
            hole_revealed=True,
            cards=[c.code for c in cards],
            total=table.dealer.value,
        )
    return DealerView(
        upcard=upcard,
        hole_revealed=False,
        cards=[upcard] if upcard else [],
        total=None,
    )


def _player_view(player: Player, viewer_id: str) -> PlayerView:
    return PlayerView(
        id=player.id,
        name=player.name,
        seat=player.seat,
        chips=player.chips,
        is_you=player.id == viewer_id,
        is_bot=player.is_bot,
    )


def _hand_view(table: TableState, player: Player, hand: Hand) -> HandView:
    rules = table.rules
    score = hand.score
    active = (
        table.phase == Phase.ACTING
        and table.turn is not None
        and table.turn.player_id == player.id
        and table.turn.hand_id == hand.id
    )
    affordable = player.chips >= hand.bet
    return HandView(
        id=hand.id,
        cards=[c.code for c in hand.cards],
        total=score.total,
        soft=score.soft,
        bet=hand.bet,
        can_split=active and affordable and split_allowed(player, hand, rules),
        can_double=active and affordable and double_allowed(hand, rules),
        can_surrender=active and surrender_allowed(hand, rules),
        is_bust=score.is_bust,
        is_blackjack=hand.is_natural,
        is_active=active,
        is_settled=hand.settled,
    )


def project(table: TableState, viewer_id: str) -> TableView:
    """
    Build the snapshot a given player is allowed to see.

    Derived flags are recomputed from the rules and the current state;
    nothing here is persisted.
    """
    seated = table.seated
    you = table.player(viewer_id)
    turn = None
    if table.turn is not None:
        turn = TurnView(player_id=table.turn.player_id, hand_id=table.turn.hand_id)

    return TableView(
        session_id=table.id,
        code=table.code,
        shoe_size=table.shoe.cards_remaining,
        cut_card_penetration=table.shoe.penetration,
        round=table.round,
        dealer=_dealer_view(table),
        players=[_player_view(p, viewer_id) for p in seated],
        hands={p.id: [_hand_view(table, p, h) for h in p.hands] for p in seated},
        turn=turn,
        phase=table.phase.value,
        you=_player_view(you, viewer_id) if you is not None else None,
    )
