"""
Serializers for payments app
"""
from decimal import Decimal

from rest_framework import serializers

from branches.models import Branch
from students.models import MembershipHistory
from .models import Expense
from .services import PAYMENT_METHODS


class CollectionSerializer(serializers.ModelSerializer):
    """One history row in the collections table (camelCase for the front-end)."""
    historyId = serializers.IntegerField(source='id', read_only=True)
    studentId = serializers.IntegerField(source='student_id', read_only=True)
    shiftTitle = serializers.CharField(source='shift.title', read_only=True, default=None)
    totalFee = serializers.DecimalField(source='total_fee', max_digits=10, decimal_places=2, read_only=True)
    amountPaid = serializers.DecimalField(source='amount_paid', max_digits=10, decimal_places=2, read_only=True)
    dueAmount = serializers.DecimalField(source='due_amount', max_digits=10, decimal_places=2, read_only=True)
    securityMoney = serializers.DecimalField(source='security_money', max_digits=10, decimal_places=2, read_only=True)
    createdAt = serializers.DateTimeField(source='changed_at', read_only=True)
    branchId = serializers.IntegerField(source='branch_id', read_only=True, allow_null=True)
    branchName = serializers.CharField(source='branch.name', read_only=True, default=None)

    class Meta:
        model = MembershipHistory
        fields = [
            'historyId', 'studentId', 'name', 'shiftTitle', 'totalFee', 'amountPaid', 'dueAmount',
            'cash', 'online', 'securityMoney', 'remark', 'createdAt', 'branchId', 'branchName',
        ]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        for key in ('totalFee', 'amountPaid', 'dueAmount', 'cash', 'online', 'securityMoney'):
            data[key] = float(data[key]) if data[key] is not None else 0.0
        data['remark'] = data['remark'] or ''
        return data


class SettlePaymentSerializer(serializers.Serializer):
    """Body of PUT /api/collections/<historyId>"""
    payment_amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        error_messages={
            'required': 'Invalid payment_amount',
            'null': 'Invalid payment_amount',
            'invalid': 'Invalid payment_amount',
        },
    )
    payment_method = serializers.ChoiceField(
        choices=PAYMENT_METHODS,
        error_messages={
            'required': 'Invalid payment_method',
            'null': 'Invalid payment_method',
            'invalid_choice': 'Invalid payment_method',
        },
    )

    def validate_payment_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Invalid payment_amount')
        return value


class ExpenseSerializer(serializers.ModelSerializer):
    branch_id = serializers.PrimaryKeyRelatedField(
        source='branch',
        queryset=Branch.objects.all(),
        required=False,
        allow_null=True,
    )
    branch_name = serializers.CharField(source='branch.name', read_only=True, default=None)
    amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01'),
        error_messages={'min_value': 'Amount must be greater than 0'},
    )
    created_by = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = Expense
        fields = ['id', 'branch_id', 'branch_name', 'title', 'amount', 'date', 'note', 'created_by', 'created_at']
        read_only_fields = ['id', 'created_by', 'created_at']

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if data.get('amount') is not None:
            data['amount'] = float(data['amount'])
        return data
