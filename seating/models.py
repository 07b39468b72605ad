"""
Shift / seat catalogue and the seat assignment ledger
"""
from django.db import models
from django.db.models import Q


class Shift(models.Model):
    """A daily time slot (stored in the legacy `schedules` table)."""
    title = models.CharField(max_length=255)
    start_time = models.TimeField(blank=True, null=True)
    end_time = models.TimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'schedules'
        verbose_name = 'Shift'
        verbose_name_plural = 'Shifts'
        ordering = ['start_time', 'id']

    def __str__(self):
        return self.title


class Seat(models.Model):
    seat_number = models.CharField(max_length=20)
    branch = models.ForeignKey(
        'branches.Branch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='seats',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'seats'
        verbose_name = 'Seat'
        verbose_name_plural = 'Seats'
        ordering = ['branch_id', 'seat_number']
        constraints = [
            models.UniqueConstraint(fields=['branch', 'seat_number'], name='unique_seat_number_per_branch'),
        ]

    def __str__(self):
        return f"Seat {self.seat_number}"


class SeatAssignment(models.Model):
    """
    One row per (student, shift). `seat` is NULL when the student attends the
    shift without a fixed seat; only non-null seats are exclusive per shift.
    """
    seat = models.ForeignKey(
        Seat,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='assignments',
    )
    shift = models.ForeignKey(
        Shift,
        on_delete=models.CASCADE,
        related_name='assignments',
    )
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.CASCADE,
        related_name='seat_assignments',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'seat_assignments'
        verbose_name = 'Seat assignment'
        verbose_name_plural = 'Seat assignments'
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['seat', 'shift'],
                condition=Q(seat__isnull=False),
                name='unique_seat_per_shift',
            ),
        ]
        indexes = [
            models.Index(fields=['student', '-id'], name='assignment_student_idx'),
        ]

    def __str__(self):
        return f"{self.student_id} -> seat {self.seat_id} / shift {self.shift_id}"
