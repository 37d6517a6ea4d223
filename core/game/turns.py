"""Turn sequencing across players and split hands."""

from core.game.table import TableState, Turn


def _first_open_hand(table: TableState, player_ids: list[str]) -> Turn | None:
    """Return the first unsettled hand, visiting players in the given order."""
    for player_id in player_ids:
        player = table.players[player_id]
        for hand in player.hands:
            if not hand.settled:
                return Turn(player_id=player_id, hand_id=hand.id)
    return None


def first_turn(table: TableState) -> Turn | None:
    """Return the opening turn of a round: the first open hand in order."""
    return _first_open_hand(table, table.order)


def next_turn(table: TableState) -> Turn | None:
    """
    Find the hand that acts after the current one.

    The current player's remaining hands come first, in creation order,
    so split hands resolve before the turn moves on. Then the following
    players in ``order`` are scanned, wrapping around once.
    """
    if table.turn is None or table.turn.player_id not in table.order:
        return first_turn(table)

    idx = table.order.index(table.turn.player_id)
    rotation = table.order[idx:] + table.order[:idx]
    return _first_open_hand(table, rotation)


def advance(table: TableState) -> Turn | None:
    """Move the turn pointer forward and return it (None means dealer's turn)."""
    table.turn = next_turn(table)
    return table.turn
