"""
Tests for the acquisition state machine.
"""

import pytest

from visionmate.core.state import (
    AcquisitionState,
    AcquisitionStateMachine,
    StateTransition,
    is_valid_transition,
)
from visionmate.vision.errors import ErrorKind


class TestTransitions:
    """Tests for transition validation."""

    @pytest.mark.parametrize(
        "from_state, to_state",
        [
            (AcquisitionState.IDLE, AcquisitionState.REQUESTING),
            (AcquisitionState.IDLE, AcquisitionState.FAILED),
            (AcquisitionState.REQUESTING, AcquisitionState.SUCCEEDED),
            (AcquisitionState.REQUESTING, AcquisitionState.RETRYING),
            (AcquisitionState.REQUESTING, AcquisitionState.FAILED),
            (AcquisitionState.RETRYING, AcquisitionState.REQUESTING),
        ],
    )
    def test_valid(self, from_state, to_state):
        assert is_valid_transition(from_state, to_state) is True

    @pytest.mark.parametrize(
        "from_state, to_state",
        [
            (AcquisitionState.IDLE, AcquisitionState.SUCCEEDED),
            (AcquisitionState.RETRYING, AcquisitionState.FAILED),
            (AcquisitionState.SUCCEEDED, AcquisitionState.REQUESTING),
            (AcquisitionState.FAILED, AcquisitionState.IDLE),
            (AcquisitionState.REQUESTING, AcquisitionState.REQUESTING),
        ],
    )
    def test_invalid(self, from_state, to_state):
        assert is_valid_transition(from_state, to_state) is False

    def test_state_transition_validates(self):
        """Test StateTransition rejects invalid pairs on construction."""
        StateTransition(AcquisitionState.IDLE, AcquisitionState.REQUESTING)

        with pytest.raises(ValueError, match="SUCCEEDED -> IDLE"):
            StateTransition(AcquisitionState.SUCCEEDED, AcquisitionState.IDLE)


class TestAcquisitionStateMachine:
    """Tests for AcquisitionStateMachine."""

    def test_initial_state(self):
        machine = AcquisitionStateMachine()

        assert machine.current_state is AcquisitionState.IDLE
        assert machine.previous_state is None
        assert machine.attempts == []
        assert machine.is_terminal is False

    def test_fallback_path(self):
        """Test a mismatch-then-success walk through the ladder."""
        machine = AcquisitionStateMachine()

        machine.request("high")
        machine.retry()
        machine.request("default")
        machine.succeed()

        assert machine.current_state is AcquisitionState.SUCCEEDED
        assert machine.attempts == ["high", "default"]
        assert machine.profile == "default"
        assert machine.is_terminal is True

    def test_failure_records_kind(self):
        machine = AcquisitionStateMachine()

        machine.request("default")
        machine.fail(ErrorKind.PERMISSION_DENIED)

        assert machine.current_state is AcquisitionState.FAILED
        assert machine.failure_kind is ErrorKind.PERMISSION_DENIED
        assert machine.previous_state is AcquisitionState.REQUESTING

    def test_terminal_states_are_final(self):
        machine = AcquisitionStateMachine()
        machine.request("default")
        machine.succeed()

        with pytest.raises(ValueError, match="Invalid state transition"):
            machine.request("low")

        assert machine.transition_to(AcquisitionState.FAILED) is False
        assert machine.current_state is AcquisitionState.SUCCEEDED

    def test_retry_requires_request(self):
        machine = AcquisitionStateMachine()

        with pytest.raises(ValueError):
            machine.retry()

    def test_attempts_is_a_copy(self):
        machine = AcquisitionStateMachine()
        machine.request("default")

        machine.attempts.append("tampered")

        assert machine.attempts == ["default"]

    def test_invalid_step_reports_transition(self):
        """Test a rejected step names both states and leaves history intact."""
        machine = AcquisitionStateMachine()
        machine.request("high")
        machine.retry()

        with pytest.raises(ValueError, match="RETRYING -> SUCCEEDED"):
            machine.succeed()

        assert machine.current_state is AcquisitionState.RETRYING
        assert machine.previous_state is AcquisitionState.REQUESTING
