"""Caller identity supplied by the upstream gateway."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Header


@dataclass(frozen=True)
class Identity:
    """Authenticated caller."""

    player_id: str
    name: str


async def resolve_identity(
    player_id: Annotated[str, Header(alias="X-Player-ID", min_length=1)],
    player_name: Annotated[str | None, Header(alias="X-Player-Name")] = None,
) -> Identity:
    """Trust the gateway's player headers; the name defaults to the id."""
    return Identity(player_id=player_id, name=player_name or player_id)
