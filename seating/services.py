"""
Seat assignment services - conflict check and ledger replacement.
Callers run these inside their own transaction.atomic() block.
"""
import logging

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from core.exceptions import SeatConflict
from .models import Seat, SeatAssignment, Shift

logger = logging.getLogger(__name__)


def resolve_seat_and_shifts(seat_id, shift_ids):
    """
    Load the requested seat and shifts. Duplicate shift ids are collapsed,
    request order is kept. Unknown ids are a 400.
    """
    seat = None
    if seat_id is not None:
        try:
            seat = Seat.objects.get(pk=seat_id)
        except Seat.DoesNotExist:
            raise ValidationError({'message': f'Seat with ID {seat_id} does not exist'})

    unique_ids = list(dict.fromkeys(shift_ids or []))
    found = Shift.objects.in_bulk(unique_ids)
    shifts = []
    for shift_id in unique_ids:
        if shift_id not in found:
            raise ValidationError({'message': f'Shift with ID {shift_id} does not exist'})
        shifts.append(found[shift_id])
    return seat, shifts


def assert_seat_available(seat, shifts, exclude_student_id=None):
    """Raise SeatConflict if `seat` is already held for any of `shifts`."""
    if seat is None or not shifts:
        return
    taken = SeatAssignment.objects.filter(seat=seat, shift__in=shifts)
    if exclude_student_id is not None:
        taken = taken.exclude(student_id=exclude_student_id)
    clash = taken.order_by('shift_id').values_list('shift_id', flat=True).first()
    if clash is not None:
        logger.info('[SEATING] conflict seat_id=%s shift_id=%s', seat.pk, clash)
        raise SeatConflict(f'Seat is already assigned for shift {clash}')


def replace_assignments(student, seat, shifts):
    """
    Delete the student's assignments and insert one per shift.
    A concurrent insert that slips past assert_seat_available trips the
    partial unique constraint and is reported as the same SeatConflict.
    """
    SeatAssignment.objects.filter(student=student).delete()
    if not shifts:
        return []
    rows = [SeatAssignment(seat=seat, shift=shift, student=student) for shift in shifts]
    try:
        # savepoint so the outer transaction stays usable after the IntegrityError
        with transaction.atomic():
            created = SeatAssignment.objects.bulk_create(rows)
    except IntegrityError:
        logger.warning('[SEATING] unique constraint hit student_id=%s seat_id=%s', student.pk, getattr(seat, 'pk', None))
        raise SeatConflict('Seat is already assigned for this shift')
    logger.info(
        '[SEATING] assigned student_id=%s seat_id=%s shifts=%s',
        student.pk, getattr(seat, 'pk', None), [s.pk for s in shifts],
    )
    return created


def release_assignments(student):
    """Drop every seat assignment held by the student. Returns the number removed."""
    deleted, _ = SeatAssignment.objects.filter(student=student).delete()
    if deleted:
        logger.info('[SEATING] released %s assignment(s) student_id=%s', deleted, student.pk)
    return deleted
