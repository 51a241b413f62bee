"""Auth API views.

Implements token-based registration and login. Registration validates the
account fields and then the role-specific profile fields before anything is
written; both sets of errors are reported together.
"""

import structlog
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from common.api.responses import envelope
from profiles.directory import role_of
from .serializers import (
    LoginSerializer,
    RegistrationSerializer,
    profile_serializer_for,
    register_user,
)

User = get_user_model()
logger = structlog.get_logger(__name__)

def _auth_payload(user, token):
    return {
        "token": token.key,
        "username": user.username,
        "email": user.email,
        "user_id": user.id,
        "role": role_of(user),
    }

class RegistrationView(APIView):
    """POST /api/registration/ -> create user + role profile, return auth token."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        account = RegistrationSerializer(data=request.data)
        account_ok = account.is_valid()
        errors = dict(account.errors)

        role = request.data.get("role")
        profile = None
        if account_ok or "role" not in errors:
            profile = profile_serializer_for(role, request.data)
            if not profile.is_valid():
                errors.update(profile.errors)

        if errors:
            raise ValidationError(errors)

        user = register_user(account, profile)
        token, _ = Token.objects.get_or_create(user=user)
        logger.info("user_registered", user_id=user.id, role=role_of(user))
        return envelope(
            "Registration successful",
            _auth_payload(user, token),
            status=status.HTTP_201_CREATED,
        )

class LoginView(APIView):
    """POST /api/login/ -> validate credentials and return auth token."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = serializer.validated_data["user"]
        token, _ = Token.objects.get_or_create(user=user)
        return envelope("Login successful", _auth_payload(user, token))
