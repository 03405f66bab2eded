"""
Authz serializers: signup, login, profile, admin user management.
"""
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from apps.authz.models import User, RoleChoices


class UserSerializer(serializers.ModelSerializer):
    """Public representation of a user (never includes credentials)."""

    class Meta:
        model = User
        fields = [
            'id',
            'name',
            'email',
            'phone',
            'role',
            'profile_picture',
            'created_at',
        ]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """Joined into prescriptions and audit logs."""

    class Meta:
        model = User
        fields = ['name', 'email', 'role']
        read_only_fields = fields


class AdminUserSerializer(serializers.ModelSerializer):
    """Admin user listing."""

    class Meta:
        model = User
        fields = [
            'id',
            'name',
            'email',
            'phone',
            'role',
            'profile_picture',
            'is_active',
            'google_id',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class SignupSerializer(serializers.Serializer):
    """
    POST /api/auth/signup/

    Duplicate email/phone is checked by the view (409, not 400).
    """
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField(max_length=255)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    password = serializers.CharField(write_only=True, min_length=6)

    def validate_email(self, value):
        return value.strip().lower()

    def validate_phone(self, value):
        return value.strip() or None

    def validate_password(self, value):
        validate_password(value)
        return value


class LoginSerializer(serializers.Serializer):
    """POST /api/auth/login/ - email or phone, plus password."""
    email = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(write_only=True, required=False, allow_blank=True)

    def validate(self, attrs):
        email = (attrs.get('email') or '').strip().lower()
        phone = (attrs.get('phone') or '').strip()
        if (not email and not phone) or not attrs.get('password'):
            raise serializers.ValidationError('Email or phone, and password required')
        attrs['email'] = email
        attrs['phone'] = phone
        return attrs


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """
    PATCH /api/auth/profile/

    Only name and phone are writable; role and email are not.
    """

    class Meta:
        model = User
        fields = ['name', 'phone']
        extra_kwargs = {
            'phone': {'allow_null': True, 'allow_blank': True, 'validators': []},
        }

    def validate_phone(self, value):
        value = (value or '').strip() or None
        if value and User.objects.filter(phone=value).exclude(pk=self.instance.pk).exists():
            raise serializers.ValidationError('Phone already registered')
        return value


class RoleUpdateSerializer(serializers.Serializer):
    """PATCH /api/admin/users/<id>/role/"""
    role = serializers.CharField()

    def validate_role(self, value):
        if value not in RoleChoices.values:
            raise serializers.ValidationError(
                f'Invalid role. Allowed: {", ".join(RoleChoices.values)}'
            )
        return value


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()
