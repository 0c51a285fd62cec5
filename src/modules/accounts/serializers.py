from __future__ import annotations

from rest_framework import serializers

from modules.accounts.models import User


class UserProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "role",
            "business_name",
            "date_joined",
            "updated_at",
        ]
        read_only_fields = fields


class AdminUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "role",
            "business_name",
            "is_active",
            "last_login",
            "date_joined",
            "updated_at",
        ]
        read_only_fields = fields
