"""
Serializers for authentication and staff profiles.
"""

from django.contrib.auth import get_user_model, password_validation
from django.contrib.auth.validators import UnicodeUsernameValidator
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .exceptions import UserExistsError
from .models import StaffProfile
from .permissions import get_user_role

User = get_user_model()


class StaffProfileSerializer(serializers.ModelSerializer):
    """Serializer for StaffProfile model. Role is never writable here."""

    class Meta:
        model = StaffProfile
        fields = [
            'id',
            'role',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """Serializer for User with the effective editorial role."""

    role = serializers.SerializerMethodField()
    profile = StaffProfileSerializer(source='staff_profile', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'is_active',
            'date_joined',
            'last_login',
            'role',
            'profile',
        ]
        read_only_fields = ['id', 'date_joined', 'last_login', 'is_active']

    def get_role(self, obj):
        role = get_user_role(obj)
        return role.value if role else None


class AuthorSerializer(serializers.ModelSerializer):
    """Compact user representation embedded in articles."""

    class Meta:
        model = User
        fields = ['id', 'username', 'first_name', 'last_name']
        read_only_fields = fields


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Token serializer that adds the editorial role claim and returns the user.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)

        token['username'] = user.username
        token['email'] = user.email

        role = get_user_role(user)
        if role:
            token['role'] = role.value

        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = UserSerializer(self.user).data
        return data


def _check_email_free(value, exclude_pk=None):
    email = value.strip().lower()
    taken = User.objects.filter(email__iexact=email)
    if exclude_pk is not None:
        taken = taken.exclude(pk=exclude_pk)
    if taken.exists():
        raise UserExistsError("User with this email already exists", field='email')
    return email


class RegisterSerializer(serializers.ModelSerializer):
    """
    Self-registration. Accounts always start as REPORTER; any role sent by
    the client is ignored.
    """

    username = serializers.CharField(max_length=150, validators=[UnicodeUsernameValidator()])
    email = serializers.EmailField(max_length=254)
    password = serializers.CharField(write_only=True, min_length=8, max_length=128)

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'first_name', 'last_name']

    def validate_username(self, value):
        if User.objects.filter(username__iexact=value).exists():
            raise UserExistsError("User with this username already exists", field='username')
        return value

    def validate_email(self, value):
        return _check_email_free(value)

    def validate_password(self, value):
        password_validation.validate_password(value)
        return value

    def create(self, validated_data):
        return User.objects.create_user(**validated_data)


class UserUpdateSerializer(serializers.ModelSerializer):
    """Self-service profile update. Role changes go through the admin."""

    class Meta:
        model = User
        fields = ['first_name', 'last_name', 'email']

    def validate_email(self, value):
        return _check_email_free(value, exclude_pk=self.instance.pk)


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()
