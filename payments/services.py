"""
Collection, due settlement and dashboard services.
Collections are membership history rows; settling a due edits the row in place.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from rest_framework.exceptions import NotFound

from core.exceptions import Overpayment
from core.utils import current_month_bounds, filter_by_branch
from students.models import MembershipHistory, Student
from .models import Expense

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ('cash', 'online')
ZERO = Decimal('0')


def collections_queryset(period=None, branch_id=None, search=None):
    """
    History rows with shift and branch joined, ordered by student name.
    period: (first_day, last_day) from core.utils.parse_month, or None for all time.
    """
    queryset = MembershipHistory.objects.select_related('shift', 'branch')
    if period is not None:
        queryset = queryset.in_period(*period)
    queryset = filter_by_branch(queryset, branch_id)
    search = (search or '').strip()
    if search:
        queryset = queryset.filter(name__icontains=search)
    return queryset.order_by('name', 'id')


@transaction.atomic
def settle_due_payment(history_id, amount, method):
    """
    Add `amount` to the history row's cash or online total and to its
    amount_paid, lowering due_amount by the same value. Rejected when `amount`
    exceeds the row's current due. The student row is synced only when this
    is the student's newest snapshot; older cycles do not touch current totals.
    """
    try:
        history = MembershipHistory.objects.select_for_update().get(pk=history_id)
    except MembershipHistory.DoesNotExist:
        raise NotFound('History record not found')

    if amount > (history.due_amount or ZERO):
        logger.info(
            f"[PAYMENT] Rejected overpayment: history_id={history_id}, amount={amount}, due={history.due_amount}"
        )
        raise Overpayment('Payment exceeds due amount')

    if method == 'cash':
        history.cash = (history.cash or ZERO) + amount
    else:
        history.online = (history.online or ZERO) + amount
    history.add_payment(amount)

    history.save(update_fields=['cash', 'online', 'amount_paid', 'due_amount'])

    latest = MembershipHistory.objects.latest_for(history.student_id)
    synced = latest is not None and latest.pk == history.pk
    if synced:
        student = Student.objects.select_for_update().get(pk=history.student_id)
        student.cash = history.cash
        student.online = history.online
        student.amount_paid = history.amount_paid
        student.due_amount = history.due_amount
        student.save(update_fields=['cash', 'online', 'amount_paid', 'due_amount', 'updated_at'])

    logger.info(
        f"[PAYMENT] Settled: history_id={history_id}, method={method}, amount={amount}, "
        f"paid={history.amount_paid}, due={history.due_amount}, student_synced={synced}"
    )
    return history


def dashboard_totals(branch_id=None):
    """
    Current calendar month: collection and due from history rows changed this
    month, expenses dated this month, profitLoss = collection - expense.
    """
    first_day, last_day = current_month_bounds()

    history = filter_by_branch(MembershipHistory.objects.in_period(first_day, last_day), branch_id)
    totals = history.aggregate(collection=Sum('amount_paid'), due=Sum('due_amount'))

    expenses = filter_by_branch(Expense.objects.filter(date__range=(first_day, last_day)), branch_id)
    expense_total = expenses.aggregate(total=Sum('amount'))['total'] or ZERO

    collection = totals['collection'] or ZERO
    return {
        'totalCollection': float(collection),
        'totalDue': float(totals['due'] or ZERO),
        'totalExpense': float(expense_total),
        'profitLoss': float(collection - expense_total),
    }


def expenses_queryset(period=None, branch_id=None):
    queryset = Expense.objects.select_related('branch', 'created_by')
    if period is not None:
        queryset = queryset.filter(date__range=period)
    return filter_by_branch(queryset, branch_id)


def create_expense(data, user):
    expense = Expense.objects.create(created_by=user, **data)
    logger.info(f"[PAYMENT] Expense created: id={expense.pk}, branch_id={expense.branch_id}, amount={expense.amount}")
    return expense
