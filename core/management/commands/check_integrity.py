"""
Database consistency check for students and seat assignments.
Reports students whose due_amount does not equal total_fee - amount_paid and
(seat, shift) pairs held more than once.
Usage: python manage.py check_integrity [--apply]
Without --apply: dry-run only (report, no changes).
"""
from django.core.management.base import BaseCommand
from django.db import transaction
from django.db.models import Count, F

from seating.models import SeatAssignment
from students.models import Student


class Command(BaseCommand):
    help = 'Check due amounts and duplicate seat assignments (recompute dues with --apply)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--apply',
            action='store_true',
            help='Recompute mismatched due amounts (default: dry-run only)',
        )

    def handle(self, *args, **options):
        apply = options['apply']
        if not apply:
            self.stdout.write(self.style.WARNING('DRY RUN - no changes will be made. Use --apply to fix.'))

        mismatched = Student.objects.exclude(due_amount=F('total_fee') - F('amount_paid'))
        count = 0
        with transaction.atomic():
            for student in mismatched.select_for_update():
                expected = student.total_fee - student.amount_paid
                self.stdout.write(
                    f'Student {student.pk} ({student.name}): due={student.due_amount} expected={expected}'
                )
                if apply:
                    student.due_amount = expected
                    student.save(update_fields=['due_amount', 'updated_at'])
                count += 1

        duplicates = (
            SeatAssignment.objects.filter(seat__isnull=False)
            .values('seat_id', 'shift_id')
            .annotate(n=Count('id'))
            .filter(n__gt=1)
        )
        for row in duplicates:
            self.stdout.write(self.style.ERROR(
                f'Seat {row["seat_id"]} is assigned {row["n"]} times for shift {row["shift_id"]}'
            ))

        verb = 'Fixed' if apply else 'Would fix'
        self.stdout.write(self.style.SUCCESS(
            f'{verb} {count} due amount(s). Duplicate seat assignments: {len(duplicates)}.'
        ))
