"""
Authentication views: signup, login, logout, profile, Google OAuth.
"""
import logging

from django.conf import settings
from django.shortcuts import redirect
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from apps.audit.models import AuditActionChoices, ResourceTypeChoices
from apps.audit.services import log_audit
from apps.core.exceptions import Conflict, OAuthNotConfigured
from apps.core.observability.events import log_domain_event
from . import oauth
from .models import User
from .serializers import (
    LoginSerializer,
    LogoutSerializer,
    ProfileUpdateSerializer,
    SignupSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid credentials'


def issue_tokens(user):
    refresh = RefreshToken.for_user(user)
    return {'token': str(refresh.access_token), 'refresh': str(refresh)}


class SignupView(APIView):
    """POST /api/auth/signup/ - create a doctor account and return tokens."""
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if User.objects.filter(email__iexact=data['email']).exists():
            raise Conflict('Email already registered')
        if data.get('phone') and User.objects.filter(phone=data['phone']).exists():
            raise Conflict('Phone already registered')

        user = User.objects.create_user(
            email=data['email'],
            password=data['password'],
            name=data['name'],
            phone=data.get('phone'),
        )

        log_audit(
            AuditActionChoices.USER_SIGNUP,
            user=user,
            resource_type=ResourceTypeChoices.USER,
            resource_id=user.pk,
            request=request,
        )
        log_domain_event('user_signup', entity_type='User', entity_id=str(user.pk))

        return Response(
            {
                'success': True,
                'message': 'User registered successfully',
                **issue_tokens(user),
                'user': UserSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """POST /api/auth/login/ - email or phone plus password."""
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if data['email']:
            user = User.objects.filter(email__iexact=data['email']).first()
        else:
            user = User.objects.filter(phone=data['phone']).first()

        if user is None or not user.is_active or not user.check_password(data['password']):
            log_audit(
                AuditActionChoices.USER_LOGIN_FAILED,
                user=None,
                resource_type=ResourceTypeChoices.USER,
                resource_id=user.pk if user else None,
                details={'method': 'email' if data['email'] else 'phone'},
                request=request,
            )
            raise AuthenticationFailed(INVALID_CREDENTIALS)

        log_audit(
            AuditActionChoices.USER_LOGIN,
            user=user,
            resource_type=ResourceTypeChoices.USER,
            resource_id=user.pk,
            request=request,
        )
        return Response({
            'success': True,
            'message': 'Login successful',
            **issue_tokens(user),
            'user': UserSerializer(user).data,
        })


class LogoutView(APIView):
    """POST /api/auth/logout/ - blacklist the given refresh token."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            RefreshToken(serializer.validated_data['refresh']).blacklist()
        except TokenError:
            raise ValidationError({'refresh': ['Invalid or expired refresh token']})
        return Response({'success': True, 'message': 'Logged out'})


class ProfileView(APIView):
    """
    GET   /api/auth/profile/ - own profile
    PATCH /api/auth/profile/ - update name and phone (role is never writable here)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({'success': True, 'user': UserSerializer(request.user).data})

    def patch(self, request):
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        log_audit(
            AuditActionChoices.PROFILE_UPDATED,
            user=user,
            resource_type=ResourceTypeChoices.USER,
            resource_id=user.pk,
            details={'fields': sorted(serializer.validated_data.keys())},
            request=request,
        )
        return Response({
            'success': True,
            'message': 'Profile updated',
            'user': UserSerializer(user).data,
        })


class GoogleLoginView(APIView):
    """GET /api/auth/google/ - redirect to Google's consent screen."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        if not oauth.is_configured():
            raise OAuthNotConfigured()
        return redirect(oauth.authorization_url())


class GoogleCallbackView(APIView):
    """
    GET /api/auth/google/callback/?code&state

    Success redirects to FRONTEND_URL/auth/callback?token=<jwt>; failure
    redirects to FRONTEND_URL/login?error=oauth_failed.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        if not oauth.is_configured():
            raise OAuthNotConfigured()

        frontend = settings.FRONTEND_URL.rstrip('/')
        try:
            oauth.verify_state(request.query_params.get('state'))
            code = request.query_params.get('code')
            if not code:
                raise oauth.OAuthError('Missing authorization code')
            user = oauth.link_google_account(oauth.fetch_profile(code))
        except oauth.OAuthError as e:
            logger.warning(
                'Google sign-in failed',
                extra={'event': 'google_oauth_failed', 'reason': str(e)}
            )
            return redirect(f'{frontend}/login?error=oauth_failed')

        log_audit(
            AuditActionChoices.USER_LOGIN,
            user=user,
            resource_type=ResourceTypeChoices.USER,
            resource_id=user.pk,
            details={'method': 'google'},
            request=request,
        )
        return redirect(f'{frontend}/auth/callback?token={issue_tokens(user)["token"]}')
