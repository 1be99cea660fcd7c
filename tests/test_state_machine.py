import pytest
from relay.services.state_machine import (
    EventState,
    InvalidTransitionError,
    can_transition,
    is_terminal,
    transition,
)


class TestValidTransitions:
    def test_received_to_filtered(self):
        assert transition(EventState.RECEIVED, EventState.FILTERED) == EventState.FILTERED

    def test_received_to_skipped(self):
        assert transition(EventState.RECEIVED, EventState.SKIPPED) == EventState.SKIPPED

    def test_full_happy_path(self):
        state = EventState.RECEIVED
        for next_state in (EventState.FILTERED, EventState.INDICATING, EventState.RESOLVING, EventState.REPLIED):
            state = transition(state, next_state)
        assert state == EventState.REPLIED

    def test_resolving_to_failed(self):
        assert transition(EventState.RESOLVING, EventState.FAILED) == EventState.FAILED


class TestInvalidTransitions:
    def test_cannot_skip_indicating(self):
        with pytest.raises(InvalidTransitionError):
            transition(EventState.FILTERED, EventState.RESOLVING)

    def test_cannot_reply_twice(self):
        with pytest.raises(InvalidTransitionError):
            transition(EventState.REPLIED, EventState.REPLIED)

    def test_skipped_is_final(self):
        with pytest.raises(InvalidTransitionError):
            transition(EventState.SKIPPED, EventState.FILTERED)

    def test_error_message(self):
        with pytest.raises(InvalidTransitionError, match="failed -> replied"):
            transition(EventState.FAILED, EventState.REPLIED)


class TestHelpers:
    def test_can_transition(self):
        assert can_transition(EventState.INDICATING, EventState.RESOLVING) is True
        assert can_transition(EventState.INDICATING, EventState.REPLIED) is False

    def test_terminal_states(self):
        assert {s for s in EventState if is_terminal(s)} == {
            EventState.REPLIED,
            EventState.FAILED,
            EventState.SKIPPED,
        }
