"""Tests for the booking flow state machine and modal variants."""

import pytest

from barbershop.conversation.booking_flow import BookingFlow, FlowState, FlowTrigger
from barbershop.conversation.modals import (
    NO_MODAL,
    AgendaModal,
    ConfirmCancelModal,
    EditAppointmentModal,
    EditItemModal,
    LoadingModal,
    MessageModal,
    ProviderProfileModal,
    describe_modal,
)
from barbershop.errors import InvalidTransitionError
from barbershop.tools.providers import ProviderDirectory
from barbershop.tools.services import ServiceCatalog
from tests.conftest import make_appointment


class TestBookingFlow:
    def test_happy_path(self):
        flow = BookingFlow()
        flow.transition(FlowTrigger.SERVICES_CHOSEN)
        flow.transition(FlowTrigger.PROVIDER_CHOSEN)
        flow.transition(FlowTrigger.BOOKING_CONFIRMED)
        assert flow.current_state == FlowState.CONFIRMED
        assert flow.get_state_trace() == [
            "service_selection", "provider_selection", "scheduling", "confirmed",
        ]

    def test_rejection_stays_in_scheduling(self):
        flow = BookingFlow()
        flow.transition(FlowTrigger.SERVICES_CHOSEN)
        flow.transition(FlowTrigger.PROVIDER_CHOSEN)
        flow.transition(FlowTrigger.BOOKING_REJECTED)
        flow.transition(FlowTrigger.BOOKING_REJECTED)
        assert flow.current_state == FlowState.SCHEDULING
        assert flow.rejection_count == 2

    def test_cannot_schedule_without_services(self):
        flow = BookingFlow()
        with pytest.raises(InvalidTransitionError):
            flow.transition(FlowTrigger.PROVIDER_CHOSEN)
        assert flow.current_state == FlowState.SERVICE_SELECTION

    def test_change_provider(self):
        flow = BookingFlow()
        flow.transition(FlowTrigger.SERVICES_CHOSEN)
        flow.transition(FlowTrigger.PROVIDER_CHOSEN)
        flow.transition(FlowTrigger.CHANGE_PROVIDER)
        assert flow.current_state == FlowState.PROVIDER_SELECTION

    def test_valid_triggers(self):
        flow = BookingFlow()
        assert flow.get_valid_triggers() == [FlowTrigger.SERVICES_CHOSEN]
        assert flow.can(FlowTrigger.SERVICES_CHOSEN)
        assert not flow.can(FlowTrigger.BOOKING_CONFIRMED)

    def test_start_over_after_confirmation(self):
        flow = BookingFlow()
        for trigger in (FlowTrigger.SERVICES_CHOSEN, FlowTrigger.PROVIDER_CHOSEN,
                        FlowTrigger.BOOKING_CONFIRMED, FlowTrigger.START_OVER):
            flow.transition(trigger)
        assert flow.current_state == FlowState.SERVICE_SELECTION

    def test_reset(self):
        flow = BookingFlow()
        flow.transition(FlowTrigger.SERVICES_CHOSEN)
        flow.reset()
        assert flow.current_state == FlowState.SERVICE_SELECTION
        assert flow.get_state_trace()[-1] == "service_selection"


class TestModals:
    def setup_method(self):
        self.provider = ProviderDirectory().get("b1")
        self.appointment = make_appointment()

    def test_no_modal_renders_empty(self):
        assert describe_modal(NO_MODAL) == ""

    def test_every_variant_renders(self):
        variants = [
            LoadingModal("Buscando estilo"),
            MessageModal("Error", "Algo falló"),
            ProviderProfileModal(self.provider),
            AgendaModal(self.provider, "2025-03-12"),
            ConfirmCancelModal(self.appointment),
            EditAppointmentModal(self.appointment, self.provider),
            EditItemModal("Editar servicio", ServiceCatalog().get("s1")),
        ]
        for modal in variants:
            assert describe_modal(modal)

    def test_profile_shows_level_and_status(self):
        text = describe_modal(ProviderProfileModal(self.provider))
        assert "Maestro Barbero" in text
        assert "online" in text

    def test_cancel_prompt_names_appointment(self):
        assert "AP-TEST" in describe_modal(ConfirmCancelModal(self.appointment))

    def test_unknown_variant_raises(self):
        with pytest.raises(TypeError):
            describe_modal("not a modal")
