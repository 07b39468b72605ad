"""
Core utilities: query-parameter parsing and branch scoping shared by the list views.
"""
import calendar
import re
from datetime import date

from django.utils import timezone
from rest_framework.exceptions import ValidationError

MONTH_RE = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')


def parse_int_param(value, message):
    """
    Parse a path or query id. Returns None for empty input and raises
    ValidationError(message) when the value is not a positive integer.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if not text.isdigit():
        raise ValidationError({'message': message})
    parsed = int(text)
    if parsed <= 0:
        raise ValidationError({'message': message})
    return parsed


def require_int(value, message):
    """Same as parse_int_param but an empty value is also an error."""
    parsed = parse_int_param(value, message)
    if parsed is None:
        raise ValidationError({'message': message})
    return parsed


def parse_month(value):
    """
    Parse a YYYY-MM query value into (first_day, last_day).
    Returns None when value is empty.
    """
    if not value:
        return None
    text = str(value).strip()
    if not MONTH_RE.match(text):
        raise ValidationError({'message': 'Invalid month format. Use YYYY-MM'})
    year, month = int(text[:4]), int(text[5:7])
    return month_bounds(year, month)


def month_bounds(year, month):
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def current_month_bounds():
    today = timezone.localdate()
    return month_bounds(today.year, today.month)


def branch_id_from_request(request, param='branchId'):
    """Optional branch filter from the query string (400 when non-numeric)."""
    return parse_int_param(request.query_params.get(param), 'Invalid branch ID')


def filter_by_branch(queryset, branch_id, branch_field='branch'):
    """Filter queryset by branch when a branch id was supplied, otherwise return all."""
    if branch_id is None:
        return queryset
    return queryset.filter(**{f'{branch_field}_id': branch_id})
