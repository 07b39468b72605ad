"""
Authentication views
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers import LoginSerializer, UserSerializer

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    POST /api/auth/login
    Body: {username, password}
    Returns: {accessToken, refreshToken, user}

    Status codes:
    - 200: Success
    - 400: Missing fields
    - 401: Invalid credentials or disabled account
    """
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = serializer.validated_data['user']
    refresh = RefreshToken.for_user(user)
    logger.info('[AUTH] login user_id=%s role=%s', user.pk, user.role)

    return Response({
        'accessToken': str(refresh.access_token),
        'refreshToken': str(refresh),
        'user': UserSerializer(user).data,
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """
    POST /api/auth/logout
    Tokens are stateless; the client discards its token.
    """
    logger.info('[AUTH] logout user_id=%s', request.user.pk)
    return Response({'message': 'Logged out successfully'}, status=status.HTTP_200_OK)
