"""
Student API views
"""
import logging

from django.conf import settings
from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsAdminOrStaff
from core.utils import branch_id_from_request, parse_int_param, require_int
from . import services
from .models import Student
from .serializers import (
    StudentDetailSerializer,
    StudentRenewSerializer,
    StudentSerializer,
    StudentStatusSerializer,
    StudentUpdateSerializer,
    StudentWriteSerializer,
)

logger = logging.getLogger(__name__)


def _student_id(pk):
    return require_int(pk, 'Invalid student ID')


def _list_response(queryset):
    queryset = queryset.select_related('branch').with_latest_assignment()
    return Response({'students': StudentSerializer(queryset, many=True).data})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminOrStaff])
def student_list_or_create_view(request):
    """
    GET /api/students?branchId=  -> every enrolled (is_active) student
    POST /api/students           -> create with seat assignments and first history row
    """
    if request.method == 'GET':
        branch_id = branch_id_from_request(request)
        return _list_response(Student.objects.enrolled().for_branch(branch_id))

    serializer = StudentWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    student = services.create_student(serializer.validated_data)
    return Response({'student': StudentSerializer(student).data}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrStaff])
def active_students_view(request):
    """GET /api/students/active?branchId= -> enrolled and not expired"""
    branch_id = branch_id_from_request(request)
    return _list_response(Student.objects.enrolled().current().for_branch(branch_id))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrStaff])
def expired_students_view(request):
    """GET /api/students/expired?branchId= -> enrolled with membership_end in the past"""
    branch_id = branch_id_from_request(request)
    return _list_response(Student.objects.enrolled().expired().for_branch(branch_id))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrStaff])
def expiring_soon_students_view(request):
    """GET /api/students/expiring-soon?branchId= -> ends within EXPIRING_SOON_DAYS, soonest first"""
    branch_id = branch_id_from_request(request)
    queryset = (
        Student.objects.enrolled()
        .expiring_within(settings.EXPIRING_SOON_DAYS)
        .for_branch(branch_id)
        .order_by('membership_end', 'name')
    )
    return _list_response(queryset)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrStaff])
def inactive_students_view(request):
    """GET /api/students/inactive?branchId= -> manually deactivated students"""
    branch_id = branch_id_from_request(request)
    return _list_response(Student.objects.deactivated().for_branch(branch_id))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrStaff])
def shift_students_view(request, shift_id):
    """
    GET /api/students/shift/<shiftId>?search=&status=active|expired|all&branchId=
    Students holding an assignment for the shift.
    """
    shift_pk = require_int(shift_id, 'Invalid Shift ID')
    branch_param = request.query_params.get('branchId')
    branch_id = None if branch_param == 'all' else parse_int_param(branch_param, 'Invalid branch ID')

    queryset = (
        Student.objects.filter(seat_assignments__shift_id=shift_pk)
        .search(request.query_params.get('search'))
        .with_status(request.query_params.get('status'))
        .for_branch(branch_id)
        .distinct()
    )
    return _list_response(queryset)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminOrStaff])
def student_detail_view(request, pk):
    """
    GET /api/students/<id>    -> student with assignments
    PUT /api/students/<id>    -> edit; overwrites the newest history row
    DELETE /api/students/<id> -> removes assignments and history too
    """
    student_id = _student_id(pk)

    if request.method == 'GET':
        try:
            student = Student.objects.select_related('branch').get(pk=student_id)
        except Student.DoesNotExist:
            raise NotFound('Student not found')
        return Response(StudentDetailSerializer(student).data)

    if request.method == 'PUT':
        serializer = StudentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        student = services.update_student(student_id, serializer.validated_data)
        return Response({'student': StudentSerializer(student).data})

    with transaction.atomic():
        student = services.get_student_for_update(student_id)
        payload = StudentSerializer(student).data
        services.delete_student(student)
    return Response({'message': 'Student deleted', 'student': payload})


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdminOrStaff])
def student_status_view(request, pk):
    """PUT /api/students/<id>/status -> body: {is_active: bool}"""
    student_id = _student_id(pk)
    serializer = StudentStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    is_active = serializer.validated_data['is_active']
    student = services.set_active_status(student_id, is_active)
    return Response({
        'student': StudentSerializer(student).data,
        'message': f"Student status updated to {'active' if is_active else 'inactive'}.",
    })


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated, IsAdminOrStaff])
def student_renew_view(request, pk):
    """PUT|POST /api/students/<id>/renew -> new cycle, amount_paid = cash + online"""
    student_id = _student_id(pk)
    serializer = StudentRenewSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    student = services.renew_membership(student_id, serializer.validated_data)
    return Response({'message': 'Membership renewed', 'student': StudentSerializer(student).data})
