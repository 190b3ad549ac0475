# users/views/auth.py
"""
LOGIN (JWT + EMAIL)

Security hardening:
- Targeted anonymous throttling on the login endpoint.
- Same error for unknown email and wrong password (no account probing).
- Tokens are issued by SimpleJWT; lifetimes come from settings.SIMPLE_JWT.
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework_simplejwt.tokens import RefreshToken

from users.serializers import LoginResponseSerializer, LoginSerializer, UserSerializer

User = get_user_model()
logger = logging.getLogger(__name__)


class LoginAnonThrottle(AnonRateThrottle):
    """
    Anonymous login throttling.
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['anon'].
    """
    scope = "anon"


class LoginView(generics.GenericAPIView):
    serializer_class = LoginSerializer
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [LoginAnonThrottle]

    @extend_schema(
        request=LoginSerializer,
        responses={200: LoginResponseSerializer},
        description="Authenticate with email and password; returns JWT access + refresh tokens",
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = User.objects.normalize_email(serializer.validated_data["email"])
        password = serializer.validated_data["password"]

        user = User.objects.filter(email__iexact=email).first()

        if user is None or not user.check_password(password):
            logger.warning("Login rejected", extra={"email": email})
            return Response(
                {"detail": "Email or password is incorrect."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        if not user.is_active:
            return Response(
                {"detail": "User account is disabled"},
                status=status.HTTP_403_FORBIDDEN,
            )

        refresh = RefreshToken.for_user(user)
        refresh["email"] = user.email

        logger.info("Login succeeded", extra={"user_id": str(user.id)})

        return Response(
            {
                "message": "Login successful",
                "access": str(refresh.access_token),
                "refresh": str(refresh),
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_200_OK,
        )
