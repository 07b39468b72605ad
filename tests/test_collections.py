"""
Collections list and due settlement.
"""
from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from students.models import MembershipHistory, Student
from tests.helpers import client_for, make_branch, make_shift, make_user, money, student_payload


class DueSettlementTests(TestCase):

    def setUp(self):
        self.admin = make_user('owner', role='admin')
        self.staff = make_user('desk', role='staff')
        self.client = client_for(self.admin)
        self.branch = make_branch()
        self.shift = make_shift('Morning')
        res = self.client.post('/api/students', student_payload(
            self.branch, total_fee='1000', cash='600', online='0', shift_ids=[self.shift.pk],
        ))
        self.assertEqual(res.status_code, 201, res.data)
        self.student_id = res.data['student']['id']
        self.history = MembershipHistory.objects.get(student_id=self.student_id)

    def _settle(self, amount, method='online', client=None):
        return (client or self.client).put(
            f'/api/collections/{self.history.pk}',
            {'payment_amount': amount, 'payment_method': method},
        )

    def test_paying_full_due_clears_it(self):
        res = self._settle(400)
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data['message'], 'Payment updated successfully')
        collection = res.data['collection']
        self.assertEqual(collection['online'], 400.0)
        self.assertEqual(collection['amountPaid'], 1000.0)
        self.assertEqual(collection['dueAmount'], 0.0)
        self.assertEqual(collection['shiftTitle'], 'Morning')

        student = Student.objects.get(pk=self.student_id)
        self.assertEqual(student.online, money(400))
        self.assertEqual(student.amount_paid, money(1000))
        self.assertEqual(student.due_amount, money(0))

    def test_partial_cash_payment(self):
        res = self._settle(150, method='cash')
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data['collection']['cash'], 750.0)
        self.assertEqual(res.data['collection']['dueAmount'], 250.0)

    def test_overpayment_is_rejected(self):
        res = self._settle(500)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['message'], 'Payment exceeds due amount')
        self.assertEqual(res.data['code'], 'overpayment')
        self.history.refresh_from_db()
        self.assertEqual(self.history.due_amount, money(400))

    def test_non_positive_amount_is_rejected(self):
        for amount in (0, -10, 'abc'):
            res = self._settle(amount)
            self.assertEqual(res.status_code, 400, amount)
            self.assertEqual(res.data['message'], 'Invalid payment_amount')

    def test_unknown_method_is_rejected(self):
        res = self._settle(100, method='card')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['message'], 'Invalid payment_method')

    def test_missing_history_is_404(self):
        res = self.client.put('/api/collections/999999', {'payment_amount': 10, 'payment_method': 'cash'})
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data['message'], 'History record not found')

    def test_staff_cannot_settle(self):
        res = self._settle(100, client=client_for(self.staff))
        self.assertEqual(res.status_code, 403)

    def test_older_cycle_does_not_touch_student_totals(self):
        renew = self.client.post(f'/api/students/{self.student_id}/renew', student_payload(
            self.branch, total_fee='1000', cash='1000', online='0',
        ))
        self.assertEqual(renew.status_code, 200, renew.data)

        res = self._settle(400)
        self.assertEqual(res.status_code, 200, res.data)
        student = Student.objects.get(pk=self.student_id)
        self.assertEqual(student.amount_paid, money(1000))
        self.assertEqual(student.online, money(0))


class ExplicitAmountPaidSettlementTests(TestCase):
    """Settlement builds on the recorded amount_paid, not on cash + online."""

    def setUp(self):
        self.client = client_for(make_user('owner', role='admin'))
        self.branch = make_branch()

    def _settle(self, history, amount, method):
        return self.client.put(
            f'/api/collections/{history.pk}',
            {'payment_amount': amount, 'payment_method': method},
        )

    def test_created_with_explicit_paid_rejects_payment_above_due(self):
        res = self.client.post('/api/students', student_payload(
            self.branch, total_fee='1000', amount_paid='600', cash='0', online='0',
        ))
        self.assertEqual(res.status_code, 201, res.data)
        history = MembershipHistory.objects.get(student_id=res.data['student']['id'])
        self.assertEqual(history.due_amount, money(400))

        res = self._settle(history, 500, 'online')
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['code'], 'overpayment')
        history.refresh_from_db()
        self.assertEqual(history.amount_paid, money(600))
        self.assertEqual(history.online, money(0))

        res = self._settle(history, 400, 'online')
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data['collection']['amountPaid'], 1000.0)
        self.assertEqual(res.data['collection']['dueAmount'], 0.0)
        self.assertEqual(res.data['collection']['online'], 400.0)

    def test_updated_with_explicit_paid_lowers_due_by_payment(self):
        res = self.client.post('/api/students', student_payload(self.branch))
        self.assertEqual(res.status_code, 201, res.data)
        student_id = res.data['student']['id']

        res = self.client.put(f'/api/students/{student_id}', student_payload(
            self.branch, total_fee='1000', amount_paid='900', cash='600', online='0',
        ))
        self.assertEqual(res.status_code, 200, res.data)
        history = MembershipHistory.objects.get(student_id=student_id)
        self.assertEqual(history.due_amount, money(100))

        res = self._settle(history, 50, 'cash')
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data['collection']['cash'], 650.0)
        self.assertEqual(res.data['collection']['amountPaid'], 950.0)
        self.assertEqual(res.data['collection']['dueAmount'], 50.0)

        student = Student.objects.get(pk=student_id)
        self.assertEqual(student.amount_paid, money(950))
        self.assertEqual(student.due_amount, money(50))


class CollectionListTests(TestCase):

    def setUp(self):
        self.client = client_for(make_user('desk'))
        self.main = make_branch('Main')
        self.north = make_branch('North', code='NR')
        for name, branch in (('Zara', self.main), ('Arjun', self.north), ('Meera', self.main)):
            res = self.client.post('/api/students', student_payload(branch, name=name))
            self.assertEqual(res.status_code, 201, res.data)

    def test_list_is_ordered_by_name(self):
        res = self.client.get('/api/collections')
        self.assertEqual(res.status_code, 200)
        self.assertEqual([c['name'] for c in res.data['collections']], ['Arjun', 'Meera', 'Zara'])
        row = res.data['collections'][0]
        self.assertEqual(row['branchName'], 'North')
        self.assertEqual(row['totalFee'], 1000.0)
        self.assertEqual(row['remark'], '')

    def test_branch_and_search_filters(self):
        res = self.client.get('/api/collections', {'branchId': self.main.pk, 'search': 'mee'})
        self.assertEqual([c['name'] for c in res.data['collections']], ['Meera'])

    def test_month_filter(self):
        this_month = timezone.localdate().strftime('%Y-%m')
        res = self.client.get('/api/collections', {'month': this_month})
        self.assertEqual(len(res.data['collections']), 3)

        MembershipHistory.objects.update(changed_at=timezone.now() - timedelta(days=70))
        res = self.client.get('/api/collections', {'month': this_month})
        self.assertEqual(res.data['collections'], [])

    def test_bad_month_format(self):
        res = self.client.get('/api/collections', {'month': '2024/01'})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['message'], 'Invalid month format. Use YYYY-MM')

    def test_bad_branch_id(self):
        res = self.client.get('/api/collections', {'branchId': 'x1'})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['message'], 'Invalid branch ID')
