"""
Authz models: auth_user with a single closed role.
"""
import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin


# ============================================================================
# Enums
# ============================================================================

class RoleChoices(models.TextChoices):
    """
    Closed set of user roles.

    - DOCTOR: creates and manages own prescriptions (default for new accounts)
    - PHARMACIST: read-only catalog and own inbox
    - ADMIN: full access, user management, audit logs
    """
    DOCTOR = 'doctor', 'Doctor'
    PHARMACIST = 'pharmacist', 'Pharmacist'
    ADMIN = 'admin', 'Admin'


# ============================================================================
# User Management
# ============================================================================

class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', RoleChoices.ADMIN)
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Application user.

    Email is the login identifier; phone is an alternative one and is unique
    when set. Accounts created through Google sign-in carry ``google_id`` and
    an unusable password. ``role`` is changed only by an admin, never by the
    user themselves.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150)
    email = models.EmailField(unique=True, max_length=255)
    phone = models.CharField(max_length=32, unique=True, null=True, blank=True)
    role = models.CharField(
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.DOCTOR,
    )
    profile_picture = models.URLField(max_length=500, blank=True, default='')
    google_id = models.CharField(max_length=64, unique=True, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)  # Required for Django admin
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        db_table = 'auth_user'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['role'], name='idx_user_role'),
            models.Index(fields=['created_at'], name='idx_user_created'),
        ]

    def __str__(self):
        return self.email

    @property
    def is_admin(self):
        return self.role == RoleChoices.ADMIN
