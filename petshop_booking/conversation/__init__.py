from petshop_booking.conversation.selection import EMPTY_SELECTION, Selection
from petshop_booking.conversation.state_machine import (
    BookingState,
    BookingStateMachine,
    InvalidTransitionError,
    TransitionTrigger,
)
from petshop_booking.conversation.booking_flow import BookingSession

__all__ = [
    "BookingSession",
    "BookingStateMachine",
    "BookingState",
    "TransitionTrigger",
    "InvalidTransitionError",
    "Selection",
    "EMPTY_SELECTION",
]
