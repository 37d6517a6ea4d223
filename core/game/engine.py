"""Blackjack table engine with state machine."""

from random import Random
from typing import Callable

from transitions import Machine

from core.cards import Card, Shoe
from core.game.errors import TableFullError, ValidationError
from core.game.events import EventEmitter, EventHandler, EventType
from core.game.settlement import settle_hands
from core.game.state import VALID_TRANSITIONS, Phase
from core.game.table import (
    Player,
    TableState,
    double_allowed,
    split_allowed,
    surrender_allowed,
)
from core.game.turns import advance, first_turn
from core.hand import Hand, dealer_should_hit
from core.strategy.basic import Action, advise
from core.strategy.rules import RuleSet

# Advisor signature: (hand, dealer upcard, rules, bankroll) -> action
Advisor = Callable[[Hand, Card, RuleSet, int], Action]

TURN_ACTIONS = ("hit", "stand", "double", "split", "surrender")


def new_table(
    table_id: str,
    rules: RuleSet,
    rng: Random,
    code: str | None = None,
) -> TableState:
    """Create an empty table in the betting phase with a fresh shoe."""
    return TableState(
        id=table_id,
        code=code,
        rules=rules,
        shoe=Shoe.build(rules.num_decks, rng),
    )


class TableMachine:
    """
    Table engine driving one TableState through its rounds.

    The machine is rebuilt around a freshly loaded snapshot for every
    request. Every intent is validated before any field is touched, so a
    rejected intent raises ValidationError and leaves the table as it was.
    """

    # State machine states
    STATES = [p.value for p in Phase]

    # One trigger per destination, e.g. "enter_settling"
    TRANSITIONS = [
        {"trigger": f"enter_{dest.value}", "source": source.value, "dest": dest.value}
        for source, dests in VALID_TRANSITIONS.items()
        for dest in dests
    ]

    def __init__(
        self,
        table: TableState,
        rng: Random | None = None,
        advisor: Advisor = advise,
    ) -> None:
        """
        Wrap a table snapshot.

        Args:
            table: The table to drive; mutated in place
            rng: Random number generator for any reshuffle
            advisor: Strategy used to play bot seats
        """
        self.table = table
        self.rng = rng or Random()
        self.advisor = advisor
        self.events = EventEmitter()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=table.phase.value,
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_sync_phase",
        )

    @property
    def phase(self) -> Phase:
        """Get current phase as enum."""
        return Phase(self._machine_state)  # type: ignore[attr-defined]

    def _sync_phase(self) -> None:
        self.table.phase = self.phase

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """Subscribe to table events."""
        self.events.subscribe(handler, event_type)

    # Roster

    def seat_player(
        self,
        player_id: str,
        name: str,
        chips: int,
        is_bot: bool = False,
    ) -> Player:
        """
        Seat a player, or return them if already seated.

        Players seated mid-round sit out until the next betting phase.
        """
        existing = self.table.player(player_id)
        if existing is not None:
            return existing
        if self.table.is_full:
            raise TableFullError("All seats are taken")

        player = Player(
            id=player_id,
            name=name,
            seat=self.table.next_seat(),
            chips=chips,
            is_bot=is_bot,
        )
        self.table.players[player_id] = player
        self.events.emit_new(
            EventType.PLAYER_JOINED,
            player_id=player_id,
            seat=player.seat,
            is_bot=is_bot,
        )
        return player

    # Intents

    def apply(
        self,
        player_id: str,
        action: str,
        hand_id: str | None = None,
        amount: int | None = None,
    ) -> None:
        """
        Apply one intent, then let bot seats play until a human is due.

        Args:
            player_id: Player submitting the intent
            action: bet, hit, stand, double, split, surrender or next
            hand_id: Hand the intent targets (defaults to the current turn)
            amount: Bet amount for "bet"
        """
        if action == "bet":
            self.bet(player_id, amount)
        elif action in TURN_ACTIONS:
            getattr(self, action)(player_id, hand_id)
        elif action == "next":
            self._require_seated(player_id)
            self.next_round()
        else:
            raise ValidationError(f"Unknown action: {action}", code="unknown-action")

        self.run_bots()

    def bet(self, player_id: str, amount: int | None = None) -> None:
        """Place a bet; deals automatically once every participant has bet."""
        player = self._require_seated(player_id)
        rules = self.table.rules

        if self.phase != Phase.BETTING:
            raise ValidationError("Bets are closed", code="not-betting")
        if player.has_bet:
            raise ValidationError("Bet already placed", code="already-bet")
        if player.chips < rules.min_bet:
            raise ValidationError(
                f"Minimum bet is {rules.min_bet}", code="insufficient-chips"
            )

        requested = rules.min_bet if amount is None else int(amount)
        stake = max(rules.min_bet, min(player.chips, requested))

        player.chips -= stake
        player.hands = [Hand(bet=stake)]
        self.events.emit_new(EventType.BET_PLACED, player_id=player_id, amount=stake)

        if all(p.has_bet for p in self.table.participants()):
            self._deal()

    def hit(self, player_id: str, hand_id: str | None = None) -> None:
        """Draw one card; a bust settles the hand and moves the turn on."""
        player, hand = self._turn_hand(player_id, hand_id)

        card = self._deal_card(hand)
        self.events.emit_new(
            EventType.PLAYER_HIT,
            player_id=player.id,
            hand_id=hand.id,
            card=card.code,
            hand_value=hand.value,
        )

        if hand.is_busted:
            hand.settle()
            self.events.emit_new(EventType.PLAYER_BUSTS, player_id=player.id, hand_id=hand.id)
            self._advance()

    def stand(self, player_id: str, hand_id: str | None = None) -> None:
        """Keep the hand as it is."""
        player, hand = self._turn_hand(player_id, hand_id)

        hand.settle()
        self.events.emit_new(
            EventType.PLAYER_STAND,
            player_id=player.id,
            hand_id=hand.id,
            hand_value=hand.value,
        )
        self._advance()

    def double(self, player_id: str, hand_id: str | None = None) -> None:
        """Double the bet, take exactly one card and finish the hand."""
        player, hand = self._turn_hand(player_id, hand_id)

        if not double_allowed(hand, self.table.rules):
            raise ValidationError("Cannot double this hand", code="cannot-double")
        if player.chips < hand.bet:
            raise ValidationError("Not enough chips to double", code="insufficient-chips")

        player.chips -= hand.bet
        hand.bet *= 2
        hand.doubled = True
        self._deal_card(hand)
        hand.settle()

        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            player_id=player.id,
            hand_id=hand.id,
            hand_value=hand.value,
            new_bet=hand.bet,
        )
        if hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, player_id=player.id, hand_id=hand.id)

        self._advance()

    def split(self, player_id: str, hand_id: str | None = None) -> None:
        """Split a pair into two hands carrying the same bet."""
        player, hand = self._turn_hand(player_id, hand_id)

        if not split_allowed(player, hand, self.table.rules):
            raise ValidationError("Cannot split this hand", code="cannot-split")
        if player.chips < hand.bet:
            raise ValidationError("Not enough chips to split", code="insufficient-chips")

        player.chips -= hand.bet
        second = Hand(cards=[hand.cards.pop()], bet=hand.bet, split=True)
        hand.split = True
        player.hands.append(second)

        self.events.emit_new(
            EventType.PLAYER_SPLIT,
            player_id=player.id,
            hand_id=hand.id,
            new_hand_id=second.id,
        )

    def surrender(self, player_id: str, hand_id: str | None = None) -> None:
        """Give up the hand and take back half the bet right away."""
        player, hand = self._turn_hand(player_id, hand_id)

        if not surrender_allowed(hand, self.table.rules):
            raise ValidationError("Cannot surrender this hand", code="cannot-surrender")

        refund = hand.bet // 2
        hand.surrendered = True
        hand.settle()
        player.chips += refund

        self.events.emit_new(
            EventType.PLAYER_SURRENDER,
            player_id=player.id,
            hand_id=hand.id,
            refund=refund,
        )
        self._advance()

    def next_round(self) -> None:
        """Clear the settled round and reopen betting."""
        if self.phase != Phase.SETTLING:
            raise ValidationError("Round is not settled yet", code="not-settling")

        table = self.table
        for player in table.players.values():
            player.hands = []
            player.insurance = None
        table.dealer = Hand()
        table.order = []

        if table.shoe.needs_shuffle:
            self._reshuffle(reason="cut-card")

        self.enter_betting()  # type: ignore[attr-defined]
        self.events.emit_new(EventType.NEXT_ROUND, round=table.round)

    # Bots

    def run_bots(self) -> None:
        """Let bot seats bet and play until a human is due or the round settles."""
        table = self.table
        while True:
            if self.phase == Phase.BETTING:
                waiting = [p for p in table.participants() if p.is_bot and not p.has_bet]
                if not waiting:
                    return
                self.bet(waiting[0].id, table.rules.min_bet)
            elif self.phase == Phase.ACTING and table.turn is not None:
                player = table.player(table.turn.player_id)
                if player is None or not player.is_bot:
                    return
                self._play_bot(player)
            else:
                return

    def _play_bot(self, player: Player) -> None:
        hand = self.table.current_hand()
        if hand is None:
            return
        rules = self.table.rules
        action = self.advisor(hand, self.table.dealer.cards[0], rules, player.chips)
        affordable = player.chips >= hand.bet

        if action == Action.DOUBLE and double_allowed(hand, rules) and affordable:
            self.double(player.id, hand.id)
        elif action == Action.SPLIT and split_allowed(player, hand, rules) and affordable:
            self.split(player.id, hand.id)
        elif action == Action.SURRENDER and surrender_allowed(hand, rules):
            self.surrender(player.id, hand.id)
        elif action == Action.STAND or (action != Action.HIT and hand.value >= 17):
            self.stand(player.id, hand.id)
        else:
            self.hit(player.id, hand.id)

    # Round internals

    def _deal(self) -> None:
        """Deal two cards to every bettor and the dealer, then open the action."""
        table = self.table
        self.enter_dealing()  # type: ignore[attr-defined]

        # A round never starts on a shoe past the cut card
        if table.shoe.needs_shuffle:
            self._reshuffle(reason="cut-card")

        table.round += 1
        table.dealer = Hand()
        table.order = [p.id for p in table.seated if p.has_bet]

        # Player, player, ..., dealer; twice. Second dealer card is the hole card.
        for _ in range(2):
            for player_id in table.order:
                self._deal_card(table.players[player_id].hands[0])
            self._deal_card(table.dealer)

        self.events.emit_new(
            EventType.ROUND_STARTED,
            round=table.round,
            players=list(table.order),
            upcard=table.dealer.cards[0].code,
        )

        if table.rules.dealer_peeks and table.dealer.score.is_blackjack:
            self.events.emit_new(EventType.DEALER_BLACKJACK)
            self._settle()
            return

        for player_id in table.order:
            hand = table.players[player_id].hands[0]
            if hand.is_natural:
                hand.settle()
                self.events.emit_new(
                    EventType.PLAYER_BLACKJACK, player_id=player_id, hand_id=hand.id
                )

        self.enter_acting()  # type: ignore[attr-defined]
        table.turn = first_turn(table)
        if table.turn is None:
            self._play_dealer()
        else:
            self._turn_changed()

    def _advance(self) -> None:
        if advance(self.table) is None:
            self._play_dealer()
        else:
            self._turn_changed()

    def _turn_changed(self) -> None:
        turn = self.table.turn
        if turn is not None:
            self.events.emit_new(
                EventType.TURN_CHANGED, player_id=turn.player_id, hand_id=turn.hand_id
            )

    def _play_dealer(self) -> None:
        """Reveal the hole card, draw to the rules and settle."""
        table = self.table
        table.turn = None
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=table.dealer.cards[1].code,
            hand_value=table.dealer.value,
        )

        # No need to draw when no hand is left to beat
        live = any(
            not hand.surrendered and not hand.is_busted and not hand.is_natural
            for player_id in table.order
            for hand in table.players[player_id].hands
        )
        if live:
            while dealer_should_hit(table.dealer.cards, table.rules):
                self._deal_card(table.dealer)
                self.events.emit_new(EventType.DEALER_HITS, hand_value=table.dealer.value)

        self._settle()

    def _settle(self) -> None:
        """Pay every hand against the final dealer hand."""
        table = self.table
        hands = [
            (player_id, hand)
            for player_id in table.order
            for hand in table.players[player_id].hands
        ]

        for result in settle_hands(hands, table.dealer.cards, table.rules):
            table.players[result.player_id].chips += result.credit
            self.events.emit_new(
                EventType.HAND_SETTLED,
                player_id=result.player_id,
                hand_id=result.hand_id,
                payout=result.payout,
                credit=result.credit,
            )

        for _, hand in hands:
            hand.settle()
        table.turn = None

        self.enter_settling()  # type: ignore[attr-defined]
        self.events.emit_new(
            EventType.ROUND_SETTLED,
            round=table.round,
            dealer_value=table.dealer.value,
        )

    def _deal_card(self, hand: Hand) -> Card:
        card = self._draw()
        hand.add_card(card)
        self.events.emit_new(EventType.CARD_DEALT, hand_id=hand.id, hand_value=hand.value)
        return card

    def _draw(self) -> Card:
        if not self.table.shoe.cards:
            self._reshuffle(reason="empty")
        return self.table.shoe.draw()

    def _reshuffle(self, reason: str) -> None:
        self.table.shoe = Shoe.build(self.table.rules.num_decks, self.rng)
        self.events.emit_new(
            EventType.SHOE_SHUFFLED,
            reason=reason,
            cards=self.table.shoe.cards_remaining,
        )

    # Validation

    def _require_seated(self, player_id: str) -> Player:
        player = self.table.player(player_id)
        if player is None:
            raise ValidationError("Not seated at this table", code="not-seated")
        return player

    def _turn_hand(self, player_id: str, hand_id: str | None) -> tuple[Player, Hand]:
        """Return the player and hand an action targets, or reject it."""
        player = self._require_seated(player_id)
        turn = self.table.turn

        if self.phase != Phase.ACTING or turn is None or turn.player_id != player_id:
            raise ValidationError("Not your turn", code="not-your-turn")

        if hand_id is not None and hand_id != turn.hand_id:
            other = player.hand(hand_id)
            if other is not None and other.settled:
                raise ValidationError("Hand already settled", code="hand-settled")
            raise ValidationError("Not your turn", code="not-your-turn")

        hand = player.hand(turn.hand_id)
        if hand is None or hand.settled:
            raise ValidationError("Hand already settled", code="hand-settled")
        return player, hand
