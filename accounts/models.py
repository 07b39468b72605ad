"""
Custom User Model with Roles and capability list
"""
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone


ROLE_ADMIN = 'admin'
ROLE_STAFF = 'staff'

# Capabilities a staff user may be granted; admins implicitly hold all of them
CAPABILITIES = ('manage_branches', 'manage_seating', 'manage_expenses')


class UserManager(BaseUserManager):
    """Custom user manager where username is the unique identifier"""

    def create_user(self, username, password=None, **extra_fields):
        """Create and save a regular user with username and password"""
        if not username:
            raise ValueError('The Username field must be set')
        username = self.model.normalize_username(username)
        extra_fields.setdefault('role', ROLE_STAFF)
        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        """Create and save a superuser (always an admin)"""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields['role'] = ROLE_ADMIN

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(username, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User Model
    Username-based authentication. `role` decides admin-only routes,
    `permissions` lists the capabilities granted to staff.
    """
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_STAFF, 'Staff'),
    ]

    username = models.CharField(max_length=150, unique=True)
    full_name = models.CharField(max_length=255, blank=True, default='')
    email = models.EmailField(blank=True, null=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_STAFF, db_index=True)
    permissions = models.JSONField(default=list, blank=True)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = ['full_name']

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['username']

    def __str__(self):
        return f"{self.username} ({self.role})"

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    def has_capability(self, name):
        """Admins hold every capability; staff only the ones in `permissions`."""
        if self.is_admin:
            return True
        return name in (self.permissions or [])
