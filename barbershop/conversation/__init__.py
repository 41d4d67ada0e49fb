from barbershop.conversation.booking_flow import BookingFlow, FlowState, FlowTrigger
from barbershop.conversation.modals import NO_MODAL, Modal, describe_modal

__all__ = [
    "BookingFlow",
    "FlowState",
    "FlowTrigger",
    "Modal",
    "NO_MODAL",
    "describe_modal",
]
