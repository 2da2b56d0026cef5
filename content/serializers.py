"""Serializers for content app."""

from rest_framework import serializers

from .models import Category, Post


class CategorySerializer(serializers.ModelSerializer):
    """Serializer for categories."""

    post_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "color",
            "sort_order",
            "is_active",
            "post_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CategoryWriteSerializer(serializers.Serializer):
    """Input for creating or updating a category."""

    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    color = serializers.RegexField(r"^#[0-9A-Fa-f]{6}$", required=False)
    sort_order = serializers.IntegerField(required=False)
    is_active = serializers.BooleanField(required=False)


class CategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "slug", "color"]
        read_only_fields = fields


class PostListSerializer(serializers.ModelSerializer):
    """Post listing entry, without bodies."""

    category = CategorySummarySerializer(read_only=True)
    author = serializers.CharField(source="author.username", read_only=True, default=None)
    status = serializers.CharField(read_only=True)
    url = serializers.CharField(read_only=True)

    class Meta:
        model = Post
        fields = [
            "id",
            "title",
            "slug",
            "url",
            "excerpt",
            "category",
            "author",
            "featured_image",
            "tags",
            "status",
            "is_published",
            "is_featured",
            "views",
            "reading_time",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PostSerializer(PostListSerializer):
    """Full post representation."""

    class Meta(PostListSerializer.Meta):
        fields = PostListSerializer.Meta.fields + [
            "body",
            "body_en",
            "meta_description",
            "meta_keywords",
        ]
        read_only_fields = fields


class PostWriteSerializer(serializers.Serializer):
    """
    Input for creating or updating a post.

    `status` ('published' / 'draft') is accepted as an alias for
    `is_published`.
    """

    title = serializers.CharField(max_length=500)
    body = serializers.CharField(trim_whitespace=False)
    body_en = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    excerpt = serializers.CharField(required=False, allow_blank=True)
    category = serializers.IntegerField(min_value=1)
    featured_image = serializers.CharField(max_length=1024, required=False, allow_blank=True)
    tags = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False
    )
    meta_description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    meta_keywords = serializers.CharField(max_length=500, required=False, allow_blank=True)
    is_published = serializers.BooleanField(required=False)
    is_featured = serializers.BooleanField(required=False)
    status = serializers.ChoiceField(choices=["published", "draft"], required=False)

    def validate_body(self, value):
        if not value.strip():
            raise serializers.ValidationError("Body cannot be empty.")
        return value

    def validate(self, attrs):
        status = attrs.pop("status", None)
        if status is not None:
            attrs["is_published"] = status == "published"
        return attrs


class BulkIdsSerializer(serializers.Serializer):
    """Request schema for bulk endpoints. ids are validated by the service."""

    ids = serializers.ListField(child=serializers.IntegerField(min_value=1))


class BulkStatusSerializer(BulkIdsSerializer):
    status = serializers.ChoiceField(choices=["published", "draft"])
