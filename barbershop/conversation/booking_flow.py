"""
Finite state machine for the client booking flow.

Services are chosen first, then a provider, then a date and time. The
scheduling engine is consulted only in the SCHEDULING state; a rejected
attempt keeps the flow there so the client can correct the time.

Usage:
    flow = BookingFlow()
    flow.transition(FlowTrigger.SERVICES_CHOSEN)
    assert flow.current_state == FlowState.PROVIDER_SELECTION
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from barbershop.errors import InvalidTransitionError

logger = logging.getLogger(__name__)


class FlowState(str, Enum):
    """All states of a booking flow."""
    SERVICE_SELECTION = "service_selection"
    PROVIDER_SELECTION = "provider_selection"
    SCHEDULING = "scheduling"
    CONFIRMED = "confirmed"


class FlowTrigger(str, Enum):
    """Events that move the booking flow."""
    SERVICES_CHOSEN = "services_chosen"
    SERVICES_CLEARED = "services_cleared"
    PROVIDER_CHOSEN = "provider_chosen"
    CHANGE_PROVIDER = "change_provider"
    BOOKING_REJECTED = "booking_rejected"
    BOOKING_CONFIRMED = "booking_confirmed"
    START_OVER = "start_over"


@dataclass(frozen=True)
class Transition:
    """A single valid state transition."""
    from_state: FlowState
    to_state: FlowState
    trigger: FlowTrigger


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: FlowState
    entered_at: datetime
    trigger: Optional[FlowTrigger] = None


class BookingFlow:
    """Deterministic booking flow. Undefined transitions are rejected."""

    TRANSITIONS: list[Transition] = [
        # --- Services ---
        Transition(FlowState.SERVICE_SELECTION, FlowState.PROVIDER_SELECTION,
                   FlowTrigger.SERVICES_CHOSEN),

        # --- Provider ---
        Transition(FlowState.PROVIDER_SELECTION, FlowState.SCHEDULING,
                   FlowTrigger.PROVIDER_CHOSEN),
        Transition(FlowState.PROVIDER_SELECTION, FlowState.SERVICE_SELECTION,
                   FlowTrigger.SERVICES_CLEARED),

        # --- Scheduling ---
        Transition(FlowState.SCHEDULING, FlowState.SCHEDULING,
                   FlowTrigger.BOOKING_REJECTED),
        Transition(FlowState.SCHEDULING, FlowState.PROVIDER_SELECTION,
                   FlowTrigger.CHANGE_PROVIDER),
        Transition(FlowState.SCHEDULING, FlowState.SERVICE_SELECTION,
                   FlowTrigger.SERVICES_CLEARED),
        Transition(FlowState.SCHEDULING, FlowState.CONFIRMED,
                   FlowTrigger.BOOKING_CONFIRMED),

        # --- Next booking ---
        Transition(FlowState.CONFIRMED, FlowState.SERVICE_SELECTION,
                   FlowTrigger.START_OVER),
    ]

    def __init__(self) -> None:
        self._current_state = FlowState.SERVICE_SELECTION
        self._history: list[StateEntry] = [
            StateEntry(state=FlowState.SERVICE_SELECTION, entered_at=datetime.now(timezone.utc))
        ]
        self._rejections: int = 0

    @property
    def current_state(self) -> FlowState:
        return self._current_state

    @property
    def rejection_count(self) -> int:
        return self._rejections

    def transition(self, trigger: FlowTrigger) -> FlowState:
        """
        Execute a state transition.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                old_state = self._current_state
                self._current_state = t.to_state
                self._history.append(StateEntry(
                    state=self._current_state,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))
                if trigger == FlowTrigger.BOOKING_REJECTED:
                    self._rejections += 1

                logger.debug(
                    "Flow transition: %s -> %s (trigger: %s)",
                    old_state.value, self._current_state.value, trigger.value,
                )
                return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def can(self, trigger: FlowTrigger) -> bool:
        return trigger in self.get_valid_triggers()

    def get_valid_triggers(self) -> list[FlowTrigger]:
        """Return all triggers valid from the current state."""
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]

    def reset(self) -> None:
        """Drop back to service selection without clearing the trace."""
        if self._current_state != FlowState.SERVICE_SELECTION:
            self._current_state = FlowState.SERVICE_SELECTION
            self._history.append(StateEntry(
                state=self._current_state, entered_at=datetime.now(timezone.utc),
            ))
