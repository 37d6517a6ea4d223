"""Table aggregate: the unit of ownership and locking."""

from dataclasses import dataclass, field

from core.cards import Shoe
from core.game.state import Phase
from core.hand import Hand
from core.strategy.rules import RuleSet

MAX_SEATS = 5


@dataclass(frozen=True)
class Turn:
    """Pointer to the hand whose action is awaited."""

    player_id: str
    hand_id: str


@dataclass
class Player:
    """A seated player and their hands for the current round."""

    id: str
    name: str
    seat: int
    chips: int
    hands: list[Hand] = field(default_factory=list)
    is_bot: bool = False
    insurance: int | None = None  # Side stake; no intent places one yet

    def hand(self, hand_id: str) -> Hand | None:
        """Look up one of this round's hands."""
        for hand in self.hands:
            if hand.id == hand_id:
                return hand
        return None

    @property
    def has_bet(self) -> bool:
        """Check if the player has a bet down this round."""
        return bool(self.hands)


@dataclass
class TableState:
    """
    Root aggregate of one table session.

    Everything reachable from here (shoe, hands, players) is owned by the
    table and persisted with it as a single snapshot.
    """

    id: str
    rules: RuleSet
    shoe: Shoe
    players: dict[str, Player] = field(default_factory=dict)
    code: str | None = None
    dealer: Hand = field(default_factory=Hand)
    round: int = 0
    order: list[str] = field(default_factory=list)
    turn: Turn | None = None
    phase: Phase = Phase.BETTING

    def player(self, player_id: str) -> Player | None:
        """Return the seated player with this id, if any."""
        return self.players.get(player_id)

    @property
    def seated(self) -> list[Player]:
        """Players in seat order."""
        return sorted(self.players.values(), key=lambda p: p.seat)

    @property
    def is_full(self) -> bool:
        """Check if every seat is taken."""
        return len(self.players) >= MAX_SEATS

    def next_seat(self) -> int:
        """Return the lowest free seat index."""
        taken = {p.seat for p in self.players.values()}
        for seat in range(MAX_SEATS):
            if seat not in taken:
                return seat
        raise ValueError("No free seat")

    def participants(self) -> list[Player]:
        """Players able to take part in the next round, in seat order."""
        return [p for p in self.seated if p.has_bet or p.chips >= self.rules.min_bet]

    def current_hand(self) -> Hand | None:
        """Return the hand the turn pointer designates."""
        if self.turn is None:
            return None
        player = self.player(self.turn.player_id)
        if player is None:
            return None
        return player.hand(self.turn.hand_id)


def double_allowed(hand: Hand, rules: RuleSet) -> bool:
    """Check the hand's shape allows a double down (chips aside)."""
    if hand.settled or len(hand.cards) != 2:
        return False
    return rules.double_after_split or not hand.split


def split_allowed(player: Player, hand: Hand, rules: RuleSet) -> bool:
    """Check the hand's shape and the split limit allow a split (chips aside)."""
    if hand.settled or not hand.is_pair:
        return False
    return len(player.hands) < rules.max_hands


def surrender_allowed(hand: Hand, rules: RuleSet) -> bool:
    """Late surrender: first two cards of an unsplit hand."""
    if not rules.surrender_allowed or hand.settled:
        return False
    return len(hand.cards) == 2 and not hand.split
