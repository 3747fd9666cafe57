from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers

from permissions.roles import ROLE_ADMIN, ROLE_CHOICES, ROLE_STAFF

User = get_user_model()


# ---------------- REGISTER ----------------
class RegisterSerializer(serializers.ModelSerializer):
    """
    Self sign-up.

    The very first account becomes the admin; everyone after that is staff.
    A client-supplied role is never trusted.
    """

    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={"input_type": "password"},
    )

    class Meta:
        model = User
        fields = [
            "email",
            "password",
            "full_name",
        ]

    def validate_email(self, value):
        value = (value or "").strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value

    @transaction.atomic
    def create(self, validated_data):
        role = ROLE_STAFF if User.objects.exists() else ROLE_ADMIN

        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            full_name=(validated_data.get("full_name") or "").strip(),
            role=role,
        )


# ---------------- LOGIN (INPUT ONLY) ----------------
class LoginSerializer(serializers.Serializer):
    """
    Input validation only.
    Authentication is handled in the view.
    """

    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "full_name",
            "role",
            "is_active",
            "created_at",
        ]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["full_name"]


# ---------------- USER ADMIN ----------------
class UserAdminSerializer(serializers.ModelSerializer):
    """
    Admin-facing user management: only role + active flag are writable.
    """

    role = serializers.ChoiceField(choices=ROLE_CHOICES, required=False)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "full_name",
            "role",
            "is_active",
            "created_at",
        ]
        read_only_fields = ["id", "email", "full_name", "created_at"]

    def validate(self, attrs):
        request = self.context.get("request")
        target = self.instance

        if request is not None and target is not None and target.pk == request.user.pk:
            if attrs.get("role", target.role) != target.role:
                raise serializers.ValidationError(
                    {"role": "You cannot change your own role."}
                )
            if attrs.get("is_active", True) is False:
                raise serializers.ValidationError(
                    {"is_active": "You cannot deactivate your own account."}
                )

        return attrs

    def update(self, instance, validated_data):
        role = validated_data.get("role")
        if role is not None:
            instance.is_staff = role == ROLE_ADMIN or instance.is_superuser
        return super().update(instance, validated_data)
