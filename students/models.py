"""
Student registry and membership history.
ERD: students (branch_id -> branches), student_membership_history (student_id, branch_id, seat_id, shift_id).
"""
from datetime import timedelta
from decimal import Decimal

from django.db import models
from django.db.models import OuterRef, Subquery
from django.utils import timezone


STATUS_ACTIVE = 'active'
STATUS_EXPIRED = 'expired'

MONEY_FIELDS = ('total_fee', 'amount_paid', 'due_amount', 'cash', 'online', 'security_money')

# Identity, membership and money fields copied into every history snapshot
SNAPSHOT_FIELDS = (
    'name', 'email', 'phone', 'address', 'registration_number', 'father_name', 'aadhar_number',
    'membership_start', 'membership_end', 'remark',
) + MONEY_FIELDS


def membership_status(membership_end, today=None):
    """'expired' once membership_end is in the past, otherwise 'active'."""
    if membership_end is None:
        return STATUS_ACTIVE
    today = today or timezone.localdate()
    return STATUS_EXPIRED if membership_end < today else STATUS_ACTIVE


def _money_field():
    return models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))


class StudentQuerySet(models.QuerySet):
    """Status filters are evaluated against today's date at query time."""

    def enrolled(self):
        return self.filter(is_active=True)

    def deactivated(self):
        return self.filter(is_active=False)

    def current(self, today=None):
        return self.filter(membership_end__gte=today or timezone.localdate())

    def expired(self, today=None):
        return self.filter(membership_end__lt=today or timezone.localdate())

    def expiring_within(self, days, today=None):
        today = today or timezone.localdate()
        return self.filter(membership_end__gte=today, membership_end__lte=today + timedelta(days=days))

    def for_branch(self, branch_id):
        if branch_id is None:
            return self
        return self.filter(branch_id=branch_id)

    def with_status(self, status):
        if status == STATUS_ACTIVE:
            return self.current()
        if status == STATUS_EXPIRED:
            return self.expired()
        return self

    def search(self, term):
        term = (term or '').strip()
        if not term:
            return self
        return self.filter(models.Q(name__icontains=term) | models.Q(phone__icontains=term))

    def with_latest_assignment(self):
        """Annotate seat_id, seat_number, shift_id and shift_title of the newest seat assignment."""
        from seating.models import SeatAssignment

        latest = SeatAssignment.objects.filter(student=OuterRef('pk')).order_by('-id')
        return self.annotate(
            seat_id=Subquery(latest.values('seat_id')[:1]),
            seat_number=Subquery(latest.values('seat__seat_number')[:1]),
            shift_id=Subquery(latest.values('shift_id')[:1]),
            shift_title=Subquery(latest.values('shift__title')[:1]),
        )


class Student(models.Model):
    """
    Library member. `status` is derived from membership_end and never stored;
    `is_active` is the manual activation switch.
    """
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    registration_number = models.CharField(max_length=50, blank=True, null=True)
    father_name = models.CharField(max_length=255, blank=True, null=True)
    aadhar_number = models.CharField(max_length=20, blank=True, null=True)
    profile_image_url = models.CharField(max_length=500, blank=True, null=True)
    branch = models.ForeignKey(
        'branches.Branch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='students',
    )
    membership_start = models.DateField()
    membership_end = models.DateField(db_index=True)

    total_fee = _money_field()
    amount_paid = _money_field()
    due_amount = _money_field()
    cash = _money_field()
    online = _money_field()
    security_money = _money_field()

    remark = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StudentQuerySet.as_manager()

    class Meta:
        db_table = 'students'
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def status(self):
        return membership_status(self.membership_end)

    def recompute_due(self):
        self.due_amount = (self.total_fee or 0) - (self.amount_paid or 0)
        return self.due_amount

    def snapshot(self):
        return {field: getattr(self, field) for field in SNAPSHOT_FIELDS}


class MembershipHistoryQuerySet(models.QuerySet):

    def latest_for(self, student_id):
        """Newest snapshot of a student (one indexed lookup), or None."""
        return self.filter(student_id=student_id).order_by('-id').first()

    def in_period(self, first_day, last_day):
        return self.filter(changed_at__date__gte=first_day, changed_at__date__lte=last_day)


class MembershipHistory(models.Model):
    """
    One row per membership cycle. Creating or renewing a student appends a row;
    editing the student or settling a due amends the newest row.
    """
    student = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name='history',
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    registration_number = models.CharField(max_length=50, blank=True, null=True)
    father_name = models.CharField(max_length=255, blank=True, null=True)
    aadhar_number = models.CharField(max_length=20, blank=True, null=True)
    membership_start = models.DateField()
    membership_end = models.DateField()
    # status at the time the snapshot was written
    status = models.CharField(max_length=20, default=STATUS_ACTIVE)

    total_fee = _money_field()
    amount_paid = _money_field()
    due_amount = _money_field()
    cash = _money_field()
    online = _money_field()
    security_money = _money_field()
    remark = models.TextField(blank=True, null=True)

    branch = models.ForeignKey(
        'branches.Branch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='membership_history',
    )
    seat = models.ForeignKey(
        'seating.Seat',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='membership_history',
    )
    shift = models.ForeignKey(
        'seating.Shift',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='membership_history',
    )
    changed_at = models.DateTimeField(default=timezone.now, db_index=True)

    objects = MembershipHistoryQuerySet.as_manager()

    class Meta:
        db_table = 'student_membership_history'
        verbose_name = 'Membership history'
        verbose_name_plural = 'Membership history'
        ordering = ['-id']
        indexes = [
            models.Index(fields=['student', '-id'], name='history_student_latest_idx'),
            models.Index(fields=['branch', 'changed_at'], name='history_branch_changed_idx'),
        ]

    def __str__(self):
        return f"History {self.pk} - {self.name} ({self.membership_start} to {self.membership_end})"

    def apply_snapshot(self, student, seat=None, shift=None):
        """Copy the student's current fields onto this row."""
        for field, value in student.snapshot().items():
            setattr(self, field, value)
        self.status = student.status
        self.branch_id = student.branch_id
        self.seat = seat
        self.shift = shift
        return self

    def add_payment(self, amount):
        """Raise amount_paid by `amount`; an explicitly recorded amount_paid is kept as the base."""
        self.amount_paid = (self.amount_paid or 0) + amount
        self.due_amount = (self.total_fee or 0) - self.amount_paid
        return self
