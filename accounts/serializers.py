"""
Serializers for accounts app
"""
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from django.contrib.auth import get_user_model

from .models import ROLE_ADMIN, ROLE_STAFF

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Full user shape for login and profile responses"""

    class Meta:
        model = User
        fields = ['id', 'username', 'full_name', 'email', 'role', 'permissions']
        read_only_fields = fields


class UserListSerializer(serializers.ModelSerializer):
    """Compact shape used by the admin user list"""

    class Meta:
        model = User
        fields = ['id', 'username', 'role', 'permissions']
        read_only_fields = fields


class LoginSerializer(serializers.Serializer):
    """Login serializer"""
    username = serializers.CharField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate(self, attrs):
        username = attrs.get('username', '').strip()
        password = attrs.get('password')

        try:
            user = User.objects.get(username=username)
        except User.DoesNotExist:
            # AuthenticationFailed maps to 401
            raise AuthenticationFailed('Invalid username or password.')

        if not user.check_password(password):
            raise AuthenticationFailed('Invalid username or password.')

        if not user.is_active:
            raise AuthenticationFailed('User account is disabled.')

        attrs['user'] = user
        return attrs


class PermissionListField(serializers.ListField):
    """List of capability strings; duplicates are dropped, order kept."""
    child = serializers.CharField(max_length=64)

    def to_internal_value(self, data):
        if not isinstance(data, list):
            raise serializers.ValidationError('Permissions must be an array of strings.')
        if any(not isinstance(item, str) for item in data):
            raise serializers.ValidationError('Permissions must be an array of strings.')
        values = super().to_internal_value(data)
        return list(dict.fromkeys(v.strip() for v in values if v.strip()))


class UserCreateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(min_length=8, write_only=True)
    role = serializers.ChoiceField(choices=[ROLE_ADMIN, ROLE_STAFF])
    full_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True, default=None)
    permissions = PermissionListField(required=False, default=list)

    def validate_username(self, value):
        value = value.strip()
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError('Username already exists')
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        return User.objects.create_user(password=password, **validated_data)


class UserUpdateSerializer(serializers.Serializer):
    """Admin edit of another user; every field optional."""
    full_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    role = serializers.ChoiceField(choices=[ROLE_ADMIN, ROLE_STAFF], required=False)
    is_active = serializers.BooleanField(required=False)
    password = serializers.CharField(min_length=8, required=False, write_only=True)
    permissions = PermissionListField(required=False)


class PermissionsUpdateSerializer(serializers.Serializer):
    permissions = PermissionListField()


class ProfileUpdateSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    current_password = serializers.CharField(required=False, allow_blank=True, write_only=True)
    new_password = serializers.CharField(min_length=8, required=False, allow_blank=True, write_only=True)

    def validate_email(self, value):
        user = self.context['request'].user
        if value and User.objects.filter(email__iexact=value).exclude(pk=user.pk).exists():
            raise serializers.ValidationError('Email already in use by another user')
        return value

    def validate(self, attrs):
        new_password = attrs.get('new_password')
        if new_password:
            user = self.context['request'].user
            if not user.check_password(attrs.get('current_password') or ''):
                raise serializers.ValidationError({'current_password': 'Current password is incorrect'})
        return attrs
