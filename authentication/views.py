import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.models import update_last_login
from django.db import DatabaseError, connection
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import permissions, status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from nokopos.exceptions import InvalidToken
from .serializers import LoginSerializer, StaffSerializer, TokenVerifySerializer

logger = logging.getLogger(__name__)

User = get_user_model()


# =============== AUTHENTICATION VIEWS ===============

class LoginView(APIView):
    """
    Staff login.

    Checks username and password against active Django users and returns a
    JWT access token (``token``) plus a refresh token.
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Staff login",
        request=LoginSerializer,
        responses={
            200: {
                'type': 'object',
                'properties': {
                    'success': {'type': 'boolean'},
                    'token': {'type': 'string', 'description': 'JWT access token'},
                    'refresh': {'type': 'string', 'description': 'JWT refresh token'},
                    'admin': {'type': 'object', 'description': 'Logged in staff account'},
                }
            },
            401: {'description': 'Invalid username or password'},
        },
        examples=[
            OpenApiExample(
                'Cashier login',
                value={"username": "cashier", "password": "SecurePassword123!"}
            ),
        ]
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data['user']

        previous_login = user.last_login
        update_last_login(None, user)
        refresh = RefreshToken.for_user(user)

        logger.info("Staff login: %s", user.username)
        admin = StaffSerializer(user).data
        admin['lastLogin'] = previous_login
        return Response({
            'success': True,
            'token': str(refresh.access_token),
            'refresh': str(refresh),
            'admin': admin,
        })


class VerifyTokenView(APIView):
    """Check that an access token is valid and still belongs to an active account"""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(summary="Verify access token", request=TokenVerifySerializer)
    def post(self, request):
        serializer = TokenVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            token = AccessToken(serializer.validated_data['token'])
        except TokenError:
            raise InvalidToken()

        user = User.objects.filter(
            **{jwt_settings.USER_ID_FIELD: token.get(jwt_settings.USER_ID_CLAIM)},
            is_active=True,
        ).first()
        if user is None:
            raise InvalidToken()

        return Response({
            'success': True,
            'admin': {'id': user.id, 'username': user.username},
        })


@extend_schema(summary="Logout", request=None)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([permissions.AllowAny])
def logout(request):
    """Tokens are stateless; the client discards its copy"""
    return Response({'success': True, 'message': 'Logged out successfully'})


# =============== SYSTEM ===============

@extend_schema(summary="Health check")
@api_view(['GET'])
@authentication_classes([])
@permission_classes([permissions.AllowAny])
def health_check(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError:
        logger.exception("Health check failed: database unreachable")
        return Response(
            {'success': False, 'message': 'database unavailable', 'database': 'error'},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return Response({'success': True, 'message': 'ok', 'database': 'ok'})
