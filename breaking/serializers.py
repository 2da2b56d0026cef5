"""Serializers for breaking app."""

from rest_framework import serializers

from .models import BreakingNews


class FlaggedItemSerializer(serializers.ModelSerializer):
    """Serializer for breaking news and last news items."""

    url = serializers.CharField(read_only=True)

    class Meta:
        model = BreakingNews
        fields = [
            "id",
            "title",
            "slug",
            "url",
            "body",
            "priority",
            "is_active",
            "expires_at",
            "views",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class FlaggedItemWriteSerializer(serializers.Serializer):
    """Input for creating or updating a flagged item."""

    title = serializers.CharField(max_length=500)
    body = serializers.CharField()
    priority = serializers.IntegerField(required=False, min_value=0, max_value=100)
    is_active = serializers.BooleanField(required=False)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)


class BulkIdsSerializer(serializers.Serializer):
    """Request schema for bulk endpoints. ids are validated by the service."""

    ids = serializers.ListField(child=serializers.IntegerField(min_value=1))


class BulkActiveSerializer(BulkIdsSerializer):
    is_active = serializers.BooleanField()
