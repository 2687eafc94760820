"""
Connection state for printer transports.

States:
    DISCONNECTED: No link held (initial and final state)
    CONNECTING: Device selection or link/port open in progress
    CONNECTED: Link held, writes allowed
"""

from enum import Enum, auto
import logging

logger = logging.getLogger(__name__)


class TransportState(Enum):
    """Transport connection states."""
    DISCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()


# Valid state transitions
VALID_TRANSITIONS: frozenset[tuple[TransportState, TransportState]] = frozenset({
    (TransportState.DISCONNECTED, TransportState.CONNECTING),
    (TransportState.CONNECTING, TransportState.CONNECTED),
    (TransportState.CONNECTING, TransportState.DISCONNECTED),  # Handshake failed
    (TransportState.CONNECTED, TransportState.DISCONNECTED),
})


class StateTracker:
    """
    Tracks the state of a single transport.

    Invalid transitions are logged and refused; disconnecting is always
    allowed so teardown works even from an inconsistent state.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._state = TransportState.DISCONNECTED

    @property
    def state(self) -> TransportState:
        """Get current state."""
        return self._state

    def can_transition(self, to_state: TransportState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in VALID_TRANSITIONS

    def transition(self, to_state: TransportState) -> bool:
        """
        Attempt to transition to a new state.

        Returns:
            True if the state changed
        """
        if to_state == self._state:
            return False

        if to_state != TransportState.DISCONNECTED and not self.can_transition(to_state):
            logger.warning(
                f"{self._name}: invalid transition {self._state.name} -> {to_state.name}"
            )
            return False

        logger.debug(f"{self._name}: {self._state.name} -> {to_state.name}")
        self._state = to_state
        return True
