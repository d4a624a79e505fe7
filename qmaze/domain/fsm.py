"""Finite State Machine for learner execution states."""

from enum import Enum, auto
from typing import Dict, Callable, Optional


class LearnerState(Enum):
    """States for learner execution."""
    IDLE = auto()
    RUNNING = auto()


class LearnerStateMachine:
    """State machine toggling the learner between IDLE and RUNNING.

    Requests for the state the machine is already in are accepted as no-ops,
    which makes start and stop idempotent.
    """

    def __init__(self):
        self.current_state = LearnerState.IDLE
        self._enter_callbacks: Dict[LearnerState, Callable[[Optional[Dict]], None]] = {}
        self._exit_callbacks: Dict[LearnerState, Callable[[Optional[Dict]], None]] = {}

    def on_state_enter(self, state: LearnerState, callback: Callable[[Optional[Dict]], None]):
        """Register callback for state entry."""
        self._enter_callbacks[state] = callback

    def on_state_exit(self, state: LearnerState, callback: Callable[[Optional[Dict]], None]):
        """Register callback for state exit."""
        self._exit_callbacks[state] = callback

    def transition(self, to_state: LearnerState, context: Optional[Dict] = None) -> bool:
        """Move to ``to_state``. Returns True only if the state actually changed."""
        from_state = self.current_state
        if from_state == to_state:
            return False

        if from_state in self._exit_callbacks:
            self._exit_callbacks[from_state](context)

        self.current_state = to_state

        if to_state in self._enter_callbacks:
            self._enter_callbacks[to_state](context)

        return True

    # Convenience methods for common transitions

    def start(self, context: Optional[Dict] = None) -> bool:
        """Start running."""
        return self.transition(LearnerState.RUNNING, context)

    def stop(self, context: Optional[Dict] = None) -> bool:
        """Return to idle."""
        return self.transition(LearnerState.IDLE, context)

    def toggle(self, context: Optional[Dict] = None) -> bool:
        """Flip between RUNNING and IDLE."""
        if self.is_running():
            return self.stop(context)
        return self.start(context)

    # State checking methods

    def is_idle(self) -> bool:
        return self.current_state == LearnerState.IDLE

    def is_running(self) -> bool:
        return self.current_state == LearnerState.RUNNING

    def get_state_description(self) -> str:
        """Get human-readable state description."""
        descriptions = {
            LearnerState.IDLE: "Idle - press Start Training to begin learning",
            LearnerState.RUNNING: "Training agent with Q-Learning",
        }
        return descriptions.get(self.current_state, "Unknown state")
