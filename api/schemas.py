"""Pydantic schemas for API requests, responses and stored snapshots."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Generic, Literal, TypeVar

T = TypeVar("T")


# Request schemas
class CreateRequest(BaseModel):
    """Request to open a table."""

    mode: Literal["solo", "pvp"] = "solo"
    decks: int | None = Field(default=None, ge=1, le=8)
    s17: bool | None = Field(default=None, description="Dealer hits soft 17")
    min_bet: int | None = Field(default=None, ge=1)
    bots: int | None = Field(default=None, ge=0, le=4, description="Solo opponents")
    code: str | None = Field(default=None, min_length=4, max_length=8)


class JoinRequest(BaseModel):
    """Request to sit down at a table by its join code."""

    code: str = Field(..., min_length=4, max_length=8)


class ActionRequest(BaseModel):
    """Request for player action."""

    session_id: str
    action: Literal["bet", "hit", "stand", "double", "split", "surrender", "next"]
    hand_id: str | None = None
    amount: int | None = Field(default=None, ge=0)


# Response schemas
class TurnResponse(BaseModel):
    """Hand whose action is awaited."""

    model_config = ConfigDict(from_attributes=True)

    player_id: str
    hand_id: str


class PlayerResponse(BaseModel):
    """Seated player."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    seat: int
    chips: int
    is_you: bool
    is_bot: bool


class HandResponse(BaseModel):
    """Hand representation."""

    model_config = ConfigDict(from_attributes=True)

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


class DealerResponse(BaseModel):
    """Dealer's visible cards."""

    model_config = ConfigDict(from_attributes=True)

    upcard: str | None
    hole_revealed: bool
    cards: list[str]
    total: int | None


class TableViewResponse(BaseModel):
    """Table snapshot as seen by one player."""

    model_config = ConfigDict(from_attributes=True)

    session_id: str
    code: str | None
    shoe_size: int
    cut_card_penetration: float
    round: int
    dealer: DealerResponse
    players: list[PlayerResponse]
    hands: dict[str, list[HandResponse]]
    turn: TurnResponse | None
    phase: Literal["betting", "dealing", "acting", "settling"]
    you: PlayerResponse | None


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope."""

    ok: Literal[True] = True
    data: T
    sig: str


class ApiError(BaseModel):
    """Failure envelope."""

    ok: Literal[False] = False
    error: str


# Snapshot persistence schemas
class HandData(BaseModel):
    """Serialized hand data."""

    id: str
    cards: list[str]
    bet: int
    settled: bool = False
    doubled: bool = False
    split: bool = False
    surrendered: bool = False


class PlayerData(BaseModel):
    """Serialized player data."""

    id: str
    name: str
    seat: int = Field(..., ge=0, le=4)
    chips: int
    hands: list[HandData] = []
    is_bot: bool = False
    insurance: int | None = Field(default=None, ge=0)


class RulesData(BaseModel):
    """Serialized rules data."""

    num_decks: int = 6
    min_bet: int = 10
    dealer_hits_soft_17: bool = True
    blackjack_payout: float = 1.5
    double_after_split: bool = True
    resplit_limit: int = 3
    surrender_allowed: bool = True
    dealer_peeks: bool = True


class ShoeData(BaseModel):
    """Serialized shoe: remaining cards, draw end last."""

    cards: list[str]
    cut_index: int
    num_decks: int


class TurnData(BaseModel):
    """Serialized turn pointer."""

    player_id: str
    hand_id: str


class TableStateData(BaseModel):
    """Serialized table snapshot for the store."""

    id: str
    code: str | None = None
    rules: RulesData
    shoe: ShoeData
    dealer: HandData
    round: int = 0
    players: list[PlayerData] = []
    order: list[str] = []
    turn: TurnData | None = None
    phase: Literal["betting", "dealing", "acting", "settling"] = "betting"
