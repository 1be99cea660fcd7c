from enum import Enum


class EventState(str, Enum):
    RECEIVED = "received"
    FILTERED = "filtered"
    INDICATING = "indicating"
    RESOLVING = "resolving"
    REPLIED = "replied"
    FAILED = "failed"
    SKIPPED = "skipped"


VALID_TRANSITIONS = {
    EventState.RECEIVED: [EventState.FILTERED, EventState.SKIPPED],
    EventState.FILTERED: [EventState.INDICATING],
    EventState.INDICATING: [EventState.RESOLVING],
    EventState.RESOLVING: [EventState.REPLIED, EventState.FAILED],
    EventState.REPLIED: [],
    EventState.FAILED: [],
    EventState.SKIPPED: [],
}

TERMINAL_STATES = {EventState.REPLIED, EventState.FAILED, EventState.SKIPPED}


class InvalidTransitionError(Exception):
    def __init__(self, from_state: EventState, to_state: EventState):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid transition: {from_state.value} -> {to_state.value}")


def can_transition(from_state: EventState, to_state: EventState) -> bool:
    """Check if transition is valid."""
    allowed = VALID_TRANSITIONS.get(from_state, [])
    return to_state in allowed


def transition(from_state: EventState, to_state: EventState) -> EventState:
    """Perform state transition. Raises InvalidTransitionError if not allowed."""
    if not can_transition(from_state, to_state):
        raise InvalidTransitionError(from_state, to_state)
    return to_state


def is_terminal(state: EventState) -> bool:
    return state in TERMINAL_STATES
