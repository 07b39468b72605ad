"""
Users Management API (admin-only), plus the caller's own profile.
"""
import logging

from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.models import ROLE_ADMIN, User
from accounts.permissions import IsAdmin
from accounts.serializers import (
    PermissionsUpdateSerializer,
    ProfileUpdateSerializer,
    UserCreateSerializer,
    UserListSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from core.utils import require_int

logger = logging.getLogger(__name__)


def _get_user_for_update(pk):
    user_id = require_int(pk, 'Invalid user ID')
    try:
        return User.objects.select_for_update().get(pk=user_id)
    except User.DoesNotExist:
        raise NotFound('User not found')


def _ensure_not_last_admin(user, message):
    """Raise when `user` is the only remaining active admin."""
    if user.role != ROLE_ADMIN:
        return
    admins = User.objects.select_for_update().filter(role=ROLE_ADMIN, is_active=True).exclude(pk=user.pk)
    if not admins.exists():
        raise ValidationError({'message': message})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def users_list_or_create_view(request):
    """
    GET /api/users  -> [{id, username, role, permissions}]
    POST /api/users -> body: username, password, role, full_name?, email?, permissions?
    """
    if request.method == 'GET':
        return Response(UserListSerializer(User.objects.all(), many=True).data)

    serializer = UserCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = serializer.save()
    logger.info('[USERS] created user_id=%s role=%s by=%s', user.pk, user.role, request.user.pk)
    return Response(
        {'message': 'User created successfully', 'user': UserListSerializer(user).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def user_detail_view(request, pk):
    """
    PUT /api/users/<id>    -> partial update (full_name, email, role, is_active, password, permissions)
    DELETE /api/users/<id> -> the last admin cannot be deleted
    """
    with transaction.atomic():
        user = _get_user_for_update(pk)

        if request.method == 'DELETE':
            _ensure_not_last_admin(user, 'Cannot delete the last admin')
            user.delete()
            logger.info('[USERS] deleted user_id=%s by=%s', pk, request.user.pk)
            return Response({'message': 'User deleted successfully'})

        serializer = UserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        demoting = data.get('role', user.role) != ROLE_ADMIN or data.get('is_active') is False
        if demoting:
            _ensure_not_last_admin(user, 'Cannot demote or deactivate the last admin')

        password = data.pop('password', None)
        for field, value in data.items():
            setattr(user, field, value)
        if password:
            user.set_password(password)
        user.save()

    logger.info('[USERS] updated user_id=%s fields=%s by=%s', user.pk, sorted(request.data.keys()), request.user.pk)
    return Response({'message': 'User updated successfully', 'user': UserSerializer(user).data})


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdmin])
def user_permissions_view(request, pk):
    """
    PUT /api/users/<id>/permissions
    Body: {permissions: [str]}. Takes effect on the user's next request.
    """
    serializer = PermissionsUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    with transaction.atomic():
        user = _get_user_for_update(pk)
        user.permissions = serializer.validated_data['permissions']
        user.save(update_fields=['permissions', 'updated_at'])

    logger.info('[USERS] permissions user_id=%s -> %s', user.pk, user.permissions)
    return Response({
        'message': 'User permissions updated successfully.',
        'user': UserListSerializer(user).data,
    })


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def profile_view(request):
    """
    GET /api/users/profile -> {user}
    PUT /api/users/profile -> body: full_name?, email?, current_password?, new_password?
    """
    user = request.user
    if request.method == 'GET':
        return Response({'user': UserSerializer(user).data})

    serializer = ProfileUpdateSerializer(data=request.data, context={'request': request})
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    update_fields = ['updated_at']
    for field in ('full_name', 'email'):
        if field in data and data[field] is not None:
            setattr(user, field, data[field])
            update_fields.append(field)
    if data.get('new_password'):
        user.set_password(data['new_password'])
        update_fields.append('password')
    user.save(update_fields=update_fields)

    logger.info('[USERS] profile updated user_id=%s fields=%s', user.pk, update_fields)
    return Response({'message': 'Profile updated successfully', 'user': UserSerializer(user).data})
