"""
Serializers for seating app
"""
from rest_framework import serializers

from branches.models import Branch
from .models import Seat, Shift


class ShiftSerializer(serializers.ModelSerializer):
    title = serializers.CharField(
        max_length=255,
        error_messages={'required': 'Shift title is required', 'blank': 'Shift title is required'},
    )

    class Meta:
        model = Shift
        fields = ['id', 'title', 'start_time', 'end_time', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate(self, attrs):
        start, end = attrs.get('start_time'), attrs.get('end_time')
        if start and end and end <= start:
            raise serializers.ValidationError({'end_time': 'end_time must be after start_time'})
        return attrs


class SeatSerializer(serializers.ModelSerializer):
    branch_id = serializers.PrimaryKeyRelatedField(
        source='branch',
        queryset=Branch.objects.all(),
        required=False,
        allow_null=True,
    )
    branch_name = serializers.CharField(source='branch.name', read_only=True, default=None)

    class Meta:
        model = Seat
        fields = ['id', 'seat_number', 'branch_id', 'branch_name', 'created_at']
        read_only_fields = ['id', 'created_at']
        # the (branch, seat_number) constraint is checked in validate()
        validators = []

    def validate_seat_number(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Seat number is required')
        return value

    def validate(self, attrs):
        exists = Seat.objects.filter(
            branch=attrs.get('branch'),
            seat_number=attrs['seat_number'],
        ).exists()
        if exists:
            raise serializers.ValidationError({'message': 'Seat number already exists in this branch'})
        return attrs

    def to_representation(self, instance):
        data = super().to_representation(instance)
        # set by the list view when ?shiftId= is given
        if hasattr(instance, 'is_available'):
            data['is_available'] = bool(instance.is_available)
        return data


class AssignmentSerializer(serializers.Serializer):
    """Read-only shape of one seat assignment in the student detail response"""
    seat_id = serializers.IntegerField(allow_null=True)
    shift_id = serializers.IntegerField()
    seat_number = serializers.CharField(source='seat.seat_number', default=None)
    shift_title = serializers.CharField(source='shift.title', default=None)
