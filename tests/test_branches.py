"""
Branch registry.
"""
from django.test import TestCase
from django.utils import timezone

from branches.models import Branch
from students.models import Student
from tests.helpers import client_for, make_branch, make_user


class BranchTests(TestCase):

    def setUp(self):
        self.admin_client = client_for(make_user('owner', role='admin'))
        self.staff_client = client_for(make_user('desk'))

    def test_list_ordered_by_name(self):
        make_branch('Zeta', code=None)
        make_branch('Alpha', code='AL')
        res = self.staff_client.get('/api/branches')
        self.assertEqual(res.status_code, 200)
        self.assertEqual([b['name'] for b in res.data['branches']], ['Alpha', 'Zeta'])

    def test_create(self):
        res = self.admin_client.post('/api/branches', {'name': 'Central', 'code': ''})
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data['name'], 'Central')
        self.assertIsNone(res.data['code'])

    def test_name_is_required(self):
        res = self.admin_client.post('/api/branches', {'code': 'X'})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data['message'], 'Branch name is required')

    def test_staff_without_capability_cannot_write(self):
        res = self.staff_client.post('/api/branches', {'name': 'Central'})
        self.assertEqual(res.status_code, 403)

    def test_staff_with_capability_can_write(self):
        client = client_for(make_user('manager', permissions=['manage_branches']))
        res = client.post('/api/branches', {'name': 'Central'})
        self.assertEqual(res.status_code, 201)

    def test_update_and_missing(self):
        branch = make_branch('Old')
        res = self.admin_client.put(f'/api/branches/{branch.pk}', {'name': 'New', 'code': 'NW'})
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data['code'], 'NW')

        res = self.admin_client.put('/api/branches/999999', {'name': 'Ghost'})
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data['message'], 'Branch not found')

    def test_delete_keeps_students(self):
        branch = make_branch('Closing')
        today = timezone.localdate()
        student = Student.objects.create(
            name='Asha', branch=branch, membership_start=today, membership_end=today,
        )
        res = self.admin_client.delete(f'/api/branches/{branch.pk}')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data['message'], 'Branch deleted')
        self.assertFalse(Branch.objects.filter(pk=branch.pk).exists())
        student.refresh_from_db()
        self.assertIsNone(student.branch_id)
