"""Tests for table phases and the engine's state machine."""

import pytest
from transitions import MachineError

from core.game import Phase, TableMachine
from core.game.state import VALID_TRANSITIONS


def test_round_cycle():
    """Test the phases form the betting -> settling cycle."""
    assert Phase.DEALING in VALID_TRANSITIONS[Phase.BETTING]
    assert Phase.ACTING in VALID_TRANSITIONS[Phase.DEALING]
    assert Phase.SETTLING in VALID_TRANSITIONS[Phase.DEALING]
    assert Phase.SETTLING in VALID_TRANSITIONS[Phase.ACTING]
    assert Phase.BETTING in VALID_TRANSITIONS[Phase.SETTLING]


def test_invalid_transitions():
    """Test skipping phases is not allowed."""
    assert Phase.ACTING not in VALID_TRANSITIONS[Phase.BETTING]
    assert Phase.BETTING not in VALID_TRANSITIONS[Phase.ACTING]
    assert Phase.DEALING not in VALID_TRANSITIONS[Phase.SETTLING]


def test_machine_triggers_match_table():
    """Test one trigger exists per allowed transition."""
    expected = sum(len(dests) for dests in VALID_TRANSITIONS.values())
    assert len(TableMachine.TRANSITIONS) == expected


def test_machine_rejects_illegal_trigger(machine):
    """Test the state machine refuses a transition outside the table."""
    with pytest.raises(MachineError):
        machine.enter_acting()
    assert machine.phase == Phase.BETTING


def test_machine_resumes_stored_phase(table):
    """Test a machine built around a stored table starts in its phase."""
    table.phase = Phase.SETTLING
    machine = TableMachine(table)
    assert machine.phase == Phase.SETTLING
    machine.enter_betting()
    assert table.phase == Phase.BETTING
