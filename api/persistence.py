"""Table snapshot (de)serialization for the key-value store."""

from dataclasses import asdict

from api.schemas import (
    HandData,
    PlayerData,
    RulesData,
    ShoeData,
    TableStateData,
    TurnData,
)
from core.cards import Card, Shoe
from core.game.state import Phase
from core.game.table import Player, TableState, Turn
from core.hand import Hand
from core.strategy.rules import RuleSet


def _serialize_hand(hand: Hand) -> HandData:
    """Serialize a hand."""
    return HandData(
        id=hand.id,
        cards=[c.code for c in hand.cards],
        bet=hand.bet,
        settled=hand.settled,
        doubled=hand.doubled,
        split=hand.split,
        surrendered=hand.surrendered,
    )


def _deserialize_hand(data: HandData) -> Hand:
    """Deserialize a hand."""
    return Hand(
        id=data.id,
        cards=[Card.from_string(c) for c in data.cards],
        bet=data.bet,
        settled=data.settled,
        doubled=data.doubled,
        split=data.split,
        surrendered=data.surrendered,
    )


def _serialize_player(player: Player) -> PlayerData:
    return PlayerData(
        id=player.id,
        name=player.name,
        seat=player.seat,
        chips=player.chips,
        hands=[_serialize_hand(h) for h in player.hands],
        is_bot=player.is_bot,
        insurance=player.insurance,
    )


def _deserialize_player(data: PlayerData) -> Player:
    return Player(
        id=data.id,
        name=data.name,
        seat=data.seat,
        chips=data.chips,
        hands=[_deserialize_hand(h) for h in data.hands],
        is_bot=data.is_bot,
        insurance=data.insurance,
    )


def table_to_data(table: TableState) -> TableStateData:
    """Convert the table aggregate to its storage schema."""
    turn = None
    if table.turn is not None:
        turn = TurnData(player_id=table.turn.player_id, hand_id=table.turn.hand_id)

    return TableStateData(
        id=table.id,
        code=table.code,
        rules=RulesData(**asdict(table.rules)),
        shoe=ShoeData(
            cards=[c.code for c in table.shoe.cards],
            cut_index=table.shoe.cut_index,
            num_decks=table.shoe.num_decks,
        ),
        dealer=_serialize_hand(table.dealer),
        round=table.round,
        players=[_serialize_player(p) for p in table.seated],
        order=list(table.order),
        turn=turn,
        phase=table.phase.value,
    )


def table_from_data(data: TableStateData) -> TableState:
    """Rebuild the table aggregate from its storage schema."""
    turn = None
    if data.turn is not None:
        turn = Turn(player_id=data.turn.player_id, hand_id=data.turn.hand_id)

    return TableState(
        id=data.id,
        code=data.code,
        rules=RuleSet(**data.rules.model_dump()),
        shoe=Shoe(
            cards=[Card.from_string(c) for c in data.shoe.cards],
            cut_index=data.shoe.cut_index,
            num_decks=data.shoe.num_decks,
        ),
        players={p.id: _deserialize_player(p) for p in data.players},
        dealer=_deserialize_hand(data.dealer),
        round=data.round,
        order=list(data.order),
        turn=turn,
        phase=Phase(data.phase),
    )


def dump_table(table: TableState) -> bytes:
    """Serialize a table snapshot to bytes."""
    return table_to_data(table).model_dump_json().encode()


def load_table(raw: bytes | str) -> TableState:
    """Deserialize a table snapshot from bytes."""
    return table_from_data(TableStateData.model_validate_json(raw))
