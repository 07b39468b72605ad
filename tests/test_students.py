"""
Student lifecycle: create, update, renew, status toggle, delete and the list views.
"""
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from seating.models import SeatAssignment
from students.models import MembershipHistory, Student
from tests.helpers import (
    client_for, make_branch, make_seat, make_shift, make_user, money, student_payload,
)


class StudentCreateTests(TestCase):

    def setUp(self):
        self.staff = make_user('desk', role='staff')
        self.client = client_for(self.staff)
        self.branch = make_branch()
        self.morning = make_shift('Morning')
        self.evening = make_shift('Evening')
        self.seat = make_seat('A1', self.branch)

    def test_create_defaults_amount_paid_to_cash_plus_online(self):
        res = self.client.post('/api/students', student_payload(
            self.branch, cash='400', online='200',
            seat_id=self.seat.pk, shift_ids=[self.morning.pk, self.evening.pk],
        ))
        self.assertEqual(res.status_code, 201, res.data)
        body = res.data['student']
        self.assertEqual(body['amount_paid'], 600.0)
        self.assertEqual(body['due_amount'], 400.0)
        self.assertEqual(body['status'], 'active')

        student = Student.objects.get(pk=body['id'])
        self.assertEqual(student.due_amount, student.total_fee - student.amount_paid)
        self.assertEqual(SeatAssignment.objects.filter(student=student).count(), 2)

        history = MembershipHistory.objects.get(student=student)
        self.assertEqual(history.shift_id, self.morning.pk)
        self.assertEqual(history.seat_id, self.seat.pk)
        self.assertEqual(history.due_amount, money(400))

    def test_explicit_amount_paid_wins(self):
        res = self.client.post('/api/students', student_payload(self.branch, amount_paid='900'))
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data['student']['due_amount'], 100.0)

    def test_missing_required_fields_is_400(self):
        payload = student_payload(self.branch)
        del payload['membership_end']
        res = self.client.post('/api/students', payload)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['code'], 'validation_error')
        self.assertIn('membership_end', res.data['errors'])
        self.assertFalse(Student.objects.exists())

    def test_negative_fee_is_rejected(self):
        res = self.client.post('/api/students', student_payload(self.branch, total_fee='-5'))
        self.assertEqual(res.status_code, 400)
        self.assertIn('non-negative', res.data['message'])

    def test_end_before_start_is_rejected(self):
        today = timezone.localdate()
        res = self.client.post('/api/students', student_payload(
            self.branch,
            membership_start=today.isoformat(),
            membership_end=(today - timedelta(days=1)).isoformat(),
        ))
        self.assertEqual(res.status_code, 400)

    def test_paid_above_fee_is_rejected(self):
        res = self.client.post('/api/students', student_payload(self.branch, cash='800', online='300'))
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['message'], 'Amount paid cannot exceed total fee')
        self.assertFalse(Student.objects.exists())

    def test_unknown_shift_rolls_back(self):
        res = self.client.post('/api/students', student_payload(self.branch, shift_ids=[9999]))
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['message'], 'Shift with ID 9999 does not exist')
        self.assertFalse(Student.objects.exists())
        self.assertFalse(MembershipHistory.objects.exists())

    def test_unknown_seat_is_400(self):
        res = self.client.post('/api/students', student_payload(
            self.branch, seat_id=424242, shift_ids=[self.morning.pk],
        ))
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['message'], 'Seat with ID 424242 does not exist')

    def test_seat_conflict_is_400_and_nothing_written(self):
        first = self.client.post('/api/students', student_payload(
            self.branch, seat_id=self.seat.pk, shift_ids=[self.morning.pk],
        ))
        self.assertEqual(first.status_code, 201)

        second = self.client.post('/api/students', student_payload(
            self.branch, name='Ravi', seat_id=self.seat.pk, shift_ids=[self.evening.pk, self.morning.pk],
        ))
        self.assertEqual(second.status_code, 400)
        self.assertEqual(second.data['code'], 'seat_conflict')
        self.assertEqual(second.data['message'], f'Seat is already assigned for shift {self.morning.pk}')
        self.assertEqual(Student.objects.count(), 1)
        self.assertEqual(SeatAssignment.objects.count(), 1)

    def test_null_seat_never_conflicts(self):
        for name in ('One', 'Two'):
            res = self.client.post('/api/students', student_payload(
                self.branch, name=name, seat_id='', shift_ids=[self.morning.pk],
            ))
            self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(SeatAssignment.objects.filter(seat__isnull=True).count(), 2)

    def test_unauthenticated_is_401(self):
        res = client_for(None).post('/api/students', student_payload(self.branch))
        self.assertEqual(res.status_code, 401)


class StudentLifecycleTests(TestCase):

    def setUp(self):
        self.staff = make_user('desk', role='staff')
        self.client = client_for(self.staff)
        self.branch = make_branch()
        self.shift = make_shift('Morning')
        self.seat = make_seat('A1', self.branch)
        res = self.client.post('/api/students', student_payload(
            self.branch, seat_id=self.seat.pk, shift_ids=[self.shift.pk],
        ))
        self.assertEqual(res.status_code, 201, res.data)
        self.student_id = res.data['student']['id']

    def test_update_overwrites_latest_history(self):
        res = self.client.put(f'/api/students/{self.student_id}', student_payload(
            self.branch, name='Asha V.', total_fee='1200', amount_paid='700',
            seat_id=self.seat.pk, shift_ids=[self.shift.pk],
        ))
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data['student']['due_amount'], 500.0)

        history = MembershipHistory.objects.filter(student_id=self.student_id)
        self.assertEqual(history.count(), 1)
        self.assertEqual(history.first().name, 'Asha V.')
        self.assertEqual(history.first().due_amount, money(500))

    def test_update_keeps_own_seat(self):
        res = self.client.put(f'/api/students/{self.student_id}', student_payload(
            self.branch, seat_id=self.seat.pk, shift_ids=[self.shift.pk],
        ))
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(SeatAssignment.objects.filter(student_id=self.student_id).count(), 1)

    def test_update_requires_phone_and_address(self):
        payload = student_payload(self.branch)
        del payload['address']
        res = self.client.put(f'/api/students/{self.student_id}', payload)
        self.assertEqual(res.status_code, 400)

    def test_update_without_history_appends_one(self):
        MembershipHistory.objects.filter(student_id=self.student_id).delete()
        res = self.client.put(f'/api/students/{self.student_id}', student_payload(self.branch))
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(MembershipHistory.objects.filter(student_id=self.student_id).count(), 1)

    def test_update_missing_student_is_404(self):
        res = self.client.put('/api/students/999999', student_payload(self.branch))
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data['message'], 'Student not found')

    def test_non_numeric_id_is_400(self):
        res = self.client.get('/api/students/abc')
        self.assertEqual(res.status_code, 400)

    def test_renew_appends_history_and_derives_paid(self):
        today = timezone.localdate()
        res = self.client.post(f'/api/students/{self.student_id}/renew', student_payload(
            self.branch,
            membership_start=(today + timedelta(days=31)).isoformat(),
            membership_end=(today + timedelta(days=61)).isoformat(),
            total_fee='1000', cash='300', online='200', amount_paid='1000',
            seat_id=self.seat.pk, shift_ids=[self.shift.pk],
        ))
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data['message'], 'Membership renewed')
        self.assertEqual(res.data['student']['amount_paid'], 500.0)
        self.assertEqual(res.data['student']['due_amount'], 500.0)
        self.assertEqual(MembershipHistory.objects.filter(student_id=self.student_id).count(), 2)

    def test_renew_accepts_put(self):
        res = self.client.put(f'/api/students/{self.student_id}/renew', student_payload(self.branch))
        self.assertEqual(res.status_code, 200, res.data)

    def test_renew_conflict_with_other_student(self):
        other_seat = make_seat('B1', self.branch)
        other = self.client.post('/api/students', student_payload(
            self.branch, name='Ravi', seat_id=other_seat.pk, shift_ids=[self.shift.pk],
        ))
        self.assertEqual(other.status_code, 201)

        res = self.client.post(f'/api/students/{self.student_id}/renew', student_payload(
            self.branch, seat_id=other_seat.pk, shift_ids=[self.shift.pk],
        ))
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['code'], 'seat_conflict')
        # original assignment survives the rolled-back renewal
        self.assertTrue(SeatAssignment.objects.filter(student_id=self.student_id, seat=self.seat).exists())
        self.assertEqual(MembershipHistory.objects.filter(student_id=self.student_id).count(), 1)

    def test_deactivate_releases_seats_keeps_history(self):
        res = self.client.put(f'/api/students/{self.student_id}/status', {'is_active': False})
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data['message'], 'Student status updated to inactive.')
        self.assertFalse(SeatAssignment.objects.filter(student_id=self.student_id).exists())
        self.assertTrue(MembershipHistory.objects.filter(student_id=self.student_id).exists())

        inactive = self.client.get('/api/students/inactive')
        self.assertEqual([s['id'] for s in inactive.data['students']], [self.student_id])

    def test_status_requires_boolean(self):
        res = self.client.put(f'/api/students/{self.student_id}/status', {'is_active': 'false'})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['message'], 'is_active must be a boolean value.')

    def test_delete_removes_assignments_and_history(self):
        res = self.client.delete(f'/api/students/{self.student_id}')
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data['message'], 'Student deleted')
        self.assertEqual(res.data['student']['id'], self.student_id)
        self.assertFalse(Student.objects.filter(pk=self.student_id).exists())
        self.assertFalse(SeatAssignment.objects.filter(student_id=self.student_id).exists())
        self.assertFalse(MembershipHistory.objects.filter(student_id=self.student_id).exists())

    def test_detail_includes_assignments(self):
        res = self.client.get(f'/api/students/{self.student_id}')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data['branch_name'], self.branch.name)
        self.assertEqual(len(res.data['assignments']), 1)
        self.assertEqual(res.data['assignments'][0]['seat_number'], 'A1')
        self.assertEqual(res.data['assignments'][0]['shift_title'], 'Morning')


class StudentListTests(TestCase):

    def setUp(self):
        self.client = client_for(make_user('desk'))
        self.branch = make_branch('Main')
        self.other_branch = make_branch('North', code='NR')
        self.shift = make_shift('Morning')
        today = timezone.localdate()

        def create(name, end_offset, branch=None, is_active=True):
            student = Student.objects.create(
                name=name,
                phone='1234',
                branch=branch or self.branch,
                membership_start=today - timedelta(days=60),
                membership_end=today + timedelta(days=end_offset),
                total_fee=Decimal('500'),
                is_active=is_active,
            )
            SeatAssignment.objects.create(student=student, shift=self.shift)
            return student

        self.current = create('Current', 20)
        self.expiring = create('Expiring', 3)
        self.expired = create('Expired', -1)
        self.inactive = create('Inactive', 20, is_active=False)
        self.elsewhere = create('Elsewhere', 20, branch=self.other_branch)

    def _names(self, res):
        self.assertEqual(res.status_code, 200, res.data)
        return [s['name'] for s in res.data['students']]

    def test_all_enrolled(self):
        names = self._names(self.client.get('/api/students'))
        self.assertEqual(names, ['Current', 'Elsewhere', 'Expired', 'Expiring'])

    def test_branch_filter(self):
        names = self._names(self.client.get(f'/api/students?branchId={self.other_branch.pk}'))
        self.assertEqual(names, ['Elsewhere'])

    def test_invalid_branch_id(self):
        res = self.client.get('/api/students?branchId=north')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['message'], 'Invalid branch ID')

    def test_active_excludes_expired(self):
        names = self._names(self.client.get('/api/students/active'))
        self.assertNotIn('Expired', names)
        self.assertNotIn('Inactive', names)
        self.assertIn('Current', names)

    def test_expired(self):
        res = self.client.get('/api/students/expired')
        self.assertEqual(self._names(res), ['Expired'])
        self.assertEqual(res.data['students'][0]['status'], 'expired')

    def test_expiring_soon(self):
        self.assertEqual(self._names(self.client.get('/api/students/expiring-soon')), ['Expiring'])

    def test_inactive(self):
        self.assertEqual(self._names(self.client.get('/api/students/inactive')), ['Inactive'])

    def test_shift_filters(self):
        url = f'/api/students/shift/{self.shift.pk}'
        self.assertIn('Inactive', self._names(self.client.get(url)))
        self.assertEqual(self._names(self.client.get(url, {'status': 'expired'})), ['Expired'])
        self.assertEqual(self._names(self.client.get(url, {'search': 'elsew'})), ['Elsewhere'])
        self.assertEqual(
            self._names(self.client.get(url, {'branchId': self.other_branch.pk})),
            ['Elsewhere'],
        )

    def test_shift_invalid_id(self):
        res = self.client.get('/api/students/shift/morning')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['message'], 'Invalid Shift ID')
