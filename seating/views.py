"""
Shift and seat catalogue API views
"""
import logging

from django.db.models import Exists, OuterRef
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import require_capability
from core.utils import branch_id_from_request, filter_by_branch, parse_int_param
from .models import Seat, SeatAssignment, Shift
from .serializers import SeatSerializer, ShiftSerializer

logger = logging.getLogger(__name__)

CanManageSeating = require_capability('manage_seating', safe_methods_open=True)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanManageSeating])
def shift_list_or_create_view(request):
    """
    GET /api/shifts  -> {shifts: [...]}
    POST /api/shifts -> body: {title, start_time?, end_time?}
    """
    if request.method == 'GET':
        return Response({'shifts': ShiftSerializer(Shift.objects.all(), many=True).data})

    serializer = ShiftSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    shift = serializer.save()
    logger.info('[SEATING] created shift_id=%s title=%s', shift.pk, shift.title)
    return Response(ShiftSerializer(shift).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanManageSeating])
def seat_list_or_create_view(request):
    """
    GET /api/seats?branchId=&shiftId=
        shiftId adds is_available per seat for that shift
    POST /api/seats -> body: {seat_number, branch_id?}
    """
    if request.method == 'POST':
        serializer = SeatSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        seat = serializer.save()
        logger.info('[SEATING] created seat_id=%s number=%s branch_id=%s', seat.pk, seat.seat_number, seat.branch_id)
        return Response(SeatSerializer(seat).data, status=status.HTTP_201_CREATED)

    branch_id = branch_id_from_request(request)
    shift_id = parse_int_param(request.query_params.get('shiftId'), 'Invalid Shift ID')

    seats = filter_by_branch(Seat.objects.select_related('branch'), branch_id)
    if shift_id is not None:
        taken = SeatAssignment.objects.filter(seat=OuterRef('pk'), shift_id=shift_id)
        seats = seats.annotate(is_available=~Exists(taken))

    return Response({'seats': SeatSerializer(seats, many=True).data})
