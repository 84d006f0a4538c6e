from enum import Enum


class WorkerState(str, Enum):
    IDLE = "idle"
    DRAINING = "draining"


VALID_TRANSITIONS = {
    WorkerState.IDLE: [WorkerState.DRAINING],
    WorkerState.DRAINING: [WorkerState.IDLE],
}


class InvalidTransitionError(Exception):
    def __init__(self, from_state: WorkerState, to_state: WorkerState):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid transition: {from_state.value} -> {to_state.value}")


def can_transition(from_state: WorkerState, to_state: WorkerState) -> bool:
    """Check if transition is valid."""
    allowed = VALID_TRANSITIONS.get(from_state, [])
    return to_state in allowed


def transition(from_state: WorkerState, to_state: WorkerState) -> WorkerState:
    """Perform state transition. Raises InvalidTransitionError if not allowed."""
    if not can_transition(from_state, to_state):
        raise InvalidTransitionError(from_state, to_state)
    return to_state


def start_draining(current_state: WorkerState) -> WorkerState:
    """Begin a drain cycle."""
    return transition(current_state, WorkerState.DRAINING)


def finish_draining(current_state: WorkerState) -> WorkerState:
    """Drain cycle is over, back to idle."""
    return transition(current_state, WorkerState.IDLE)
