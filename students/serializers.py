"""
Serializers for students app
"""
from decimal import Decimal

from rest_framework import serializers

from branches.models import Branch
from seating.serializers import AssignmentSerializer
from .models import MONEY_FIELDS, Student


class MoneyAsFloatMixin:
    """Render DecimalFields as JSON numbers; the front-end does arithmetic on them."""
    money_fields = MONEY_FIELDS

    def to_representation(self, instance):
        data = super().to_representation(instance)
        for field in self.money_fields:
            if field in data:
                data[field] = float(data[field]) if data[field] is not None else 0.0
        return data


class _NullableIntegerField(serializers.IntegerField):
    """Accepts empty string as None for optional IDs from frontend."""

    def to_internal_value(self, data):
        if data in (None, '', []) or (isinstance(data, str) and not str(data).strip()):
            return None
        if isinstance(data, str) and str(data).strip().isdigit():
            return int(str(data).strip())
        return super().to_internal_value(data)


class _MoneyField(serializers.DecimalField):
    """Non-negative amount; empty input counts as 0 (or None when allow_null)."""

    def __init__(self, label_text, **kwargs):
        kwargs.setdefault('max_digits', 10)
        kwargs.setdefault('decimal_places', 2)
        kwargs.setdefault('min_value', Decimal('0'))
        kwargs.setdefault('required', False)
        message = f'{label_text} must be a valid non-negative number'
        kwargs.setdefault('error_messages', {'min_value': message, 'invalid': message})
        super().__init__(**kwargs)

    def validate_empty_values(self, data):
        if data in (None, ''):
            return (True, None if self.allow_null else Decimal('0'))
        return super().validate_empty_values(data)


class StudentSerializer(MoneyAsFloatMixin, serializers.ModelSerializer):
    """Read shape shared by list, detail and write responses."""
    status = serializers.ReadOnlyField()
    branch_id = serializers.IntegerField(read_only=True, allow_null=True)
    branch_name = serializers.CharField(source='branch.name', read_only=True, default=None)

    # filled from StudentQuerySet.with_latest_assignment() when annotated
    ASSIGNMENT_ANNOTATIONS = ('seat_id', 'seat_number', 'shift_id', 'shift_title')

    class Meta:
        model = Student
        fields = [
            'id', 'name', 'email', 'phone', 'address', 'registration_number', 'father_name',
            'aadhar_number', 'profile_image_url', 'branch_id', 'branch_name',
            'membership_start', 'membership_end', 'status',
            'total_fee', 'amount_paid', 'due_amount', 'cash', 'online', 'security_money',
            'remark', 'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['remark'] = data.get('remark') or ''
        for attr in self.ASSIGNMENT_ANNOTATIONS:
            if hasattr(instance, attr):
                data[attr] = getattr(instance, attr)
        return data


class StudentDetailSerializer(StudentSerializer):
    """Single student with every seat assignment it holds."""

    def to_representation(self, instance):
        data = super().to_representation(instance)
        assignments = instance.seat_assignments.select_related('seat', 'shift').order_by('id')
        data['assignments'] = AssignmentSerializer(assignments, many=True).data
        return data


class StudentWriteSerializer(serializers.Serializer):
    """
    Input for create. Subclasses tighten the required set for update and renew.
    Cross-table checks (seat/shift existence, conflicts) live in students.services.
    """
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    registration_number = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    father_name = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    aadhar_number = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    profile_image_url = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    remark = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    branch_id = serializers.IntegerField()
    membership_start = serializers.DateField()
    membership_end = serializers.DateField()

    total_fee = _MoneyField('Total fee')
    amount_paid = _MoneyField('Amount paid', allow_null=True)
    cash = _MoneyField('Cash')
    online = _MoneyField('Online payment')
    security_money = _MoneyField('Security money')

    seat_id = _NullableIntegerField(required=False, allow_null=True, default=None)
    shift_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        required=False,
        default=list,
    )

    def validate_branch_id(self, value):
        if not Branch.objects.filter(pk=value).exists():
            raise serializers.ValidationError('Branch not found')
        return value

    def validate(self, attrs):
        if attrs['membership_end'] < attrs['membership_start']:
            raise serializers.ValidationError({'membership_end': 'membership_end cannot be before membership_start'})
        # optional text fields: '' is stored as NULL
        for field in ('email', 'registration_number', 'father_name', 'aadhar_number', 'profile_image_url'):
            if field in attrs and attrs[field] == '':
                attrs[field] = None
        return attrs


class StudentUpdateSerializer(StudentWriteSerializer):
    phone = serializers.CharField(max_length=20)
    address = serializers.CharField()


class StudentRenewSerializer(StudentWriteSerializer):
    """amount_paid is not accepted here: it is always cash + online."""
    phone = serializers.CharField(max_length=20)
    amount_paid = None


class StudentStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()

    def to_internal_value(self, data):
        # strict: "true"/1 are rejected
        value = data.get('is_active') if hasattr(data, 'get') else None
        if not isinstance(value, bool):
            raise serializers.ValidationError({'message': 'is_active must be a boolean value.'})
        return super().to_internal_value(data)
