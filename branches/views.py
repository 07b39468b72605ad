"""
Branch API views
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import require_capability
from core.utils import require_int
from .models import Branch
from .serializers import BranchSerializer

logger = logging.getLogger(__name__)

CanManageBranches = require_capability('manage_branches', safe_methods_open=True)


def _get_branch(pk):
    branch_id = require_int(pk, 'Invalid branch ID')
    try:
        return Branch.objects.get(pk=branch_id)
    except Branch.DoesNotExist:
        raise NotFound('Branch not found')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanManageBranches])
def branch_list_or_create_view(request):
    """
    GET /api/branches  -> {branches: [...]} ordered by name
    POST /api/branches -> body: {name, code?}
    """
    if request.method == 'GET':
        return Response({'branches': BranchSerializer(Branch.objects.all(), many=True).data})

    serializer = BranchSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    branch = serializer.save()
    logger.info('[BRANCH] created branch_id=%s name=%s', branch.pk, branch.name)
    return Response(BranchSerializer(branch).data, status=status.HTTP_201_CREATED)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, CanManageBranches])
def branch_detail_view(request, pk):
    """
    PUT /api/branches/<id>    -> body: {name, code?}
    DELETE /api/branches/<id> -> students, seats and history rows keep a NULL branch
    """
    branch = _get_branch(pk)

    if request.method == 'DELETE':
        branch.delete()
        logger.info('[BRANCH] deleted branch_id=%s', pk)
        return Response({'message': 'Branch deleted'})

    serializer = BranchSerializer(branch, data=request.data)
    serializer.is_valid(raise_exception=True)
    branch = serializer.save()
    logger.info('[BRANCH] updated branch_id=%s', branch.pk)
    return Response(BranchSerializer(branch).data)
