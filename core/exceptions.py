"""
Domain errors shared by the apps. Both are client errors (400) and are rendered
by config.exceptions.custom_exception_handler.
"""
from rest_framework.exceptions import ValidationError


class SeatConflict(ValidationError):
    """A (seat, shift) pair is already held by another student."""
    default_detail = 'Seat is already assigned for this shift'
    default_code = 'seat_conflict'


class Overpayment(ValidationError):
    """A due settlement would push the due amount below zero."""
    default_detail = 'Payment exceeds due amount'
    default_code = 'overpayment'
