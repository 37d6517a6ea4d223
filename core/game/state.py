"""Table phase enumeration."""

from enum import Enum


class Phase(Enum):
    """
    Table state machine phases.

    Flow: BETTING → DEALING → ACTING → SETTLING → BETTING (next round)
    """

    # Waiting for every participant to bet
    BETTING = "betting"

    # Cards being dealt
    DEALING = "dealing"

    # Players act in turn
    ACTING = "acting"

    # Round settled, waiting for the next round
    SETTLING = "settling"

    def __str__(self) -> str:
        return self.value


# Valid phase transitions
VALID_TRANSITIONS: dict[Phase, list[Phase]] = {
    Phase.BETTING: [Phase.DEALING],
    Phase.DEALING: [Phase.ACTING, Phase.SETTLING],  # SETTLING if dealer BJ
    Phase.ACTING: [Phase.SETTLING],
    Phase.SETTLING: [Phase.BETTING],
}

