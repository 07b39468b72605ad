"""
Shared fixtures for the API tests.
"""
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from branches.models import Branch
from seating.models import Seat, Shift

PASSWORD = 'secret-pass-123'


def make_user(username, role='staff', permissions=None, **extra):
    return User.objects.create_user(
        username=username,
        password=PASSWORD,
        role=role,
        permissions=permissions or [],
        **extra,
    )


def client_for(user):
    client = APIClient()
    if user is not None:
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {AccessToken.for_user(user)}')
    return client


def make_branch(name='Main', code='MN'):
    return Branch.objects.create(name=name, code=code)


def make_shift(title='Morning'):
    return Shift.objects.create(title=title)


def make_seat(number='1', branch=None):
    return Seat.objects.create(seat_number=number, branch=branch)


def student_payload(branch, **overrides):
    today = timezone.localdate()
    data = {
        'name': 'Asha Verma',
        'phone': '9876543210',
        'address': '12 Park Street',
        'email': 'asha@example.com',
        'branch_id': branch.pk,
        'membership_start': today.isoformat(),
        'membership_end': (today + timedelta(days=30)).isoformat(),
        'total_fee': '1000.00',
        'cash': '600.00',
        'online': '0.00',
        'security_money': '200.00',
        'shift_ids': [],
        'seat_id': None,
    }
    data.update(overrides)
    return data


def money(value):
    return Decimal(str(value)).quantize(Decimal('0.01'))
