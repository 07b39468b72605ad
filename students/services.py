"""
Student lifecycle services - create, update, renew, activate/deactivate, delete.
Every write runs in one transaction; raising inside it rolls everything back.
Authorization is handled by the views.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from seating.services import (
    assert_seat_available,
    release_assignments,
    replace_assignments,
    resolve_seat_and_shifts,
)
from .models import MembershipHistory, Student

logger = logging.getLogger(__name__)

TEXT_FIELDS = (
    'name', 'email', 'phone', 'address', 'registration_number', 'father_name',
    'aadhar_number', 'profile_image_url', 'remark',
)


def get_student_for_update(student_id):
    """Lock and return the student row, 404 when missing."""
    try:
        return Student.objects.select_for_update().get(pk=student_id)
    except Student.DoesNotExist:
        raise NotFound('Student not found')


def _apply_fields(student, data, derive_paid):
    """
    Copy validated input onto the student and recompute money totals.
    derive_paid=True forces amount_paid = cash + online (renewals);
    otherwise an explicit amount_paid wins and a missing one falls back to cash + online.
    """
    for field in TEXT_FIELDS:
        if field in data:
            setattr(student, field, data[field])
    student.branch_id = data['branch_id']
    student.membership_start = data['membership_start']
    student.membership_end = data['membership_end']

    for field in ('total_fee', 'cash', 'online', 'security_money'):
        if field in data:
            setattr(student, field, data[field])
        elif getattr(student, field) is None:
            setattr(student, field, Decimal('0'))

    explicit_paid = None if derive_paid else data.get('amount_paid')
    if explicit_paid is not None:
        student.amount_paid = explicit_paid
    else:
        student.amount_paid = (student.cash or 0) + (student.online or 0)

    if student.amount_paid > student.total_fee:
        raise ValidationError({'message': 'Amount paid cannot exceed total fee'})
    student.recompute_due()


def _first(shifts):
    return shifts[0] if shifts else None


@transaction.atomic
def create_student(data):
    """
    Insert a student, one seat assignment per requested shift and the first
    history snapshot. `data` is StudentWriteSerializer.validated_data.
    """
    seat, shifts = resolve_seat_and_shifts(data.get('seat_id'), data.get('shift_ids'))
    assert_seat_available(seat, shifts)

    student = Student()
    _apply_fields(student, data, derive_paid=False)
    student.save()

    replace_assignments(student, seat, shifts)
    history = record_history(student, seat, shifts)

    logger.info(
        '[STUDENT] created student_id=%s branch_id=%s fee=%s paid=%s due=%s history_id=%s',
        student.pk, student.branch_id, student.total_fee, student.amount_paid, student.due_amount, history.pk,
    )
    return student


@transaction.atomic
def update_student(student_id, data):
    """
    Edit a student in place. Assignments are replaced and the newest history
    snapshot is overwritten (a first one is appended if none exists).
    """
    student = get_student_for_update(student_id)
    seat, shifts = resolve_seat_and_shifts(data.get('seat_id'), data.get('shift_ids'))
    assert_seat_available(seat, shifts, exclude_student_id=student.pk)

    _apply_fields(student, data, derive_paid=False)
    student.save()

    replace_assignments(student, seat, shifts)

    latest = MembershipHistory.objects.select_for_update().filter(student=student).order_by('-id').first()
    if latest is None:
        latest = record_history(student, seat, shifts)
    else:
        latest.apply_snapshot(student, seat, _first(shifts))
        latest.changed_at = timezone.now()
        latest.save()

    logger.info(
        '[STUDENT] updated student_id=%s due=%s history_id=%s', student.pk, student.due_amount, latest.pk,
    )
    return student


@transaction.atomic
def renew_membership(student_id, data):
    """
    Start a new membership cycle: amount_paid = cash + online, assignments
    replaced, and a new history snapshot appended.
    """
    student = get_student_for_update(student_id)
    seat, shifts = resolve_seat_and_shifts(data.get('seat_id'), data.get('shift_ids'))
    assert_seat_available(seat, shifts, exclude_student_id=student.pk)

    _apply_fields(student, data, derive_paid=True)
    student.save()

    replace_assignments(student, seat, shifts)
    history = record_history(student, seat, shifts)

    logger.info(
        '[STUDENT] renewed student_id=%s until=%s paid=%s due=%s history_id=%s',
        student.pk, student.membership_end, student.amount_paid, student.due_amount, history.pk,
    )
    return student


@transaction.atomic
def set_active_status(student_id, is_active):
    """Toggle the manual activation flag. Deactivation frees the student's seats; history stays."""
    if not isinstance(is_active, bool):
        raise ValidationError({'message': 'is_active must be a boolean value.'})
    student = get_student_for_update(student_id)
    student.is_active = is_active
    student.save(update_fields=['is_active', 'updated_at'])
    if not is_active:
        release_assignments(student)
    logger.info('[STUDENT] status student_id=%s is_active=%s', student.pk, is_active)
    return student


@transaction.atomic
def delete_student(student):
    """Remove a (locked) student with its seat assignments and every history row."""
    student_id = student.pk
    release_assignments(student)
    removed, _ = MembershipHistory.objects.filter(student_id=student_id).delete()
    student.delete()
    logger.info('[STUDENT] deleted student_id=%s history_rows=%s', student_id, removed)


def record_history(student, seat, shifts):
    """Append a snapshot of the student's current state."""
    history = MembershipHistory(student=student)
    history.apply_snapshot(student, seat, _first(shifts))
    history.save()
    return history
