"""
Collections, expenses and dashboard API views
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsAdminOrStaff, require_capability
from core.utils import branch_id_from_request, parse_month, require_int
from . import services
from .serializers import CollectionSerializer, ExpenseSerializer, SettlePaymentSerializer

CanManageExpenses = require_capability('manage_expenses')


class ExpensePermission(IsAdmin):
    """GET is admin-only; POST needs the manage_expenses capability."""

    def has_permission(self, request, view):
        if request.method == 'POST':
            checker = CanManageExpenses()
            self.message = checker.message
            return checker.has_permission(request, view)
        return super().has_permission(request, view)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrStaff])
def collections_view(request):
    """
    GET /api/collections?month=YYYY-MM&branchId=&search=
    Returns: {collections: [...]}
    """
    period = parse_month(request.query_params.get('month'))
    branch_id = branch_id_from_request(request)
    queryset = services.collections_queryset(period, branch_id, request.query_params.get('search'))
    return Response({'collections': CollectionSerializer(queryset, many=True).data})


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdmin])
def settle_collection_view(request, history_id):
    """
    PUT /api/collections/<historyId>
    Body: {payment_amount: number > 0, payment_method: 'cash' | 'online'}
    """
    history_pk = require_int(history_id, 'Invalid history ID')
    serializer = SettlePaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    history = services.settle_due_payment(
        history_pk,
        serializer.validated_data['payment_amount'],
        serializer.validated_data['payment_method'],
    )
    return Response({
        'message': 'Payment updated successfully',
        'collection': CollectionSerializer(history).data,
    })


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, ExpensePermission])
def expense_list_or_create_view(request):
    """
    GET /api/expenses?month=YYYY-MM&branchId= -> {expenses: [...]}
    POST /api/expenses -> body: {title, amount, date?, branch_id?, note?}
    """
    if request.method == 'GET':
        period = parse_month(request.query_params.get('month'))
        branch_id = branch_id_from_request(request)
        queryset = services.expenses_queryset(period, branch_id)
        return Response({'expenses': ExpenseSerializer(queryset, many=True).data})

    serializer = ExpenseSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    expense = services.create_expense(serializer.validated_data, request.user)
    return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def dashboard_view(request):
    """
    GET /api/students/stats/dashboard?branchId=
    Returns: {totalCollection, totalDue, totalExpense, profitLoss} for the current month
    """
    branch_id = branch_id_from_request(request)
    return Response(services.dashboard_totals(branch_id))
