"""
Acquisition state management.

Defines the per-attempt state machine for camera acquisition with
explicit transitions.
"""

from enum import Enum, auto
from typing import List, Optional, Set
from dataclasses import dataclass


class AcquisitionState(Enum):
    """
    States of a single acquisition attempt.

    State transitions:
        IDLE -> REQUESTING
        REQUESTING -> SUCCEEDED
        REQUESTING -> RETRYING -> REQUESTING
        REQUESTING -> FAILED
        IDLE -> FAILED (capture not supported at all)
    """

    IDLE = auto()           # Nothing requested yet
    REQUESTING = auto()     # Waiting on the host for a profile
    RETRYING = auto()       # Profile rejected, moving to the next one
    SUCCEEDED = auto()      # Stream acquired (terminal)
    FAILED = auto()         # Classified failure (terminal)


@dataclass
class StateTransition:
    """Represents a state transition with validation."""

    from_state: AcquisitionState
    to_state: AcquisitionState

    def __post_init__(self):
        if not is_valid_transition(self.from_state, self.to_state):
            raise ValueError(
                f"Invalid state transition: {self.from_state.name} -> {self.to_state.name}"
            )


_VALID_TRANSITIONS: dict[AcquisitionState, Set[AcquisitionState]] = {
    AcquisitionState.IDLE: {
        AcquisitionState.REQUESTING,
        AcquisitionState.FAILED,
    },
    AcquisitionState.REQUESTING: {
        AcquisitionState.SUCCEEDED,
        AcquisitionState.RETRYING,
        AcquisitionState.FAILED,
    },
    AcquisitionState.RETRYING: {
        AcquisitionState.REQUESTING,
    },
    AcquisitionState.SUCCEEDED: set(),
    AcquisitionState.FAILED: set(),
}

TERMINAL_STATES = frozenset({AcquisitionState.SUCCEEDED, AcquisitionState.FAILED})


def is_valid_transition(from_state: AcquisitionState, to_state: AcquisitionState) -> bool:
    """
    Check if a state transition is valid.

    Re-entering REQUESTING is not a no-op: each entry is a new host request.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is allowed, False otherwise
    """
    return to_state in _VALID_TRANSITIONS.get(from_state, set())


class AcquisitionStateMachine:
    """
    Tracks one acquisition attempt through the fallback ladder.

    Records which profiles were requested so callers and tests can
    inspect the path taken.
    """

    def __init__(self):
        self._current_state = AcquisitionState.IDLE
        self._previous_state: Optional[AcquisitionState] = None
        self._profile: Optional[str] = None
        self._failure_kind = None
        self._attempts: List[str] = []

    @property
    def current_state(self) -> AcquisitionState:
        return self._current_state

    @property
    def previous_state(self) -> Optional[AcquisitionState]:
        return self._previous_state

    @property
    def profile(self) -> Optional[str]:
        """Name of the profile most recently requested."""
        return self._profile

    @property
    def failure_kind(self):
        """ErrorKind of the terminal failure, if FAILED."""
        return self._failure_kind

    @property
    def attempts(self) -> List[str]:
        """Profile names in the order they were requested."""
        return list(self._attempts)

    @property
    def is_terminal(self) -> bool:
        return self._current_state in TERMINAL_STATES

    def transition_to(self, new_state: AcquisitionState) -> bool:
        """
        Transition to a new state.

        Args:
            new_state: Target state

        Returns:
            True if transition succeeded, False if invalid
        """
        if not is_valid_transition(self._current_state, new_state):
            return False

        self._previous_state = self._current_state
        self._current_state = new_state
        return True

    def request(self, profile_name: str) -> None:
        """Enter REQUESTING for the given profile."""
        self._require(AcquisitionState.REQUESTING)
        self._profile = profile_name
        self._attempts.append(profile_name)

    def retry(self) -> None:
        """Mark the current profile as rejected with another one to try."""
        self._require(AcquisitionState.RETRYING)

    def succeed(self) -> None:
        self._require(AcquisitionState.SUCCEEDED)

    def fail(self, kind) -> None:
        """
        Enter FAILED with the given ErrorKind.

        Args:
            kind: ErrorKind of the failure
        """
        self._require(AcquisitionState.FAILED)
        self._failure_kind = kind

    def _require(self, new_state: AcquisitionState) -> None:
        """
        Transition or raise.

        Raises:
            ValueError: If the transition is not allowed
        """
        transition = StateTransition(self._current_state, new_state)
        self.transition_to(transition.to_state)
