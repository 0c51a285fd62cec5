from __future__ import annotations

from rest_framework import serializers

from modules.reviews.models import Review

REQUIRED_MESSAGE = "Product ID, order ID, rating, and comment are required"


class CreateReviewSerializer(serializers.Serializer):
    product_id = serializers.UUIDField(error_messages={"required": REQUIRED_MESSAGE})
    order_id = serializers.UUIDField(error_messages={"required": REQUIRED_MESSAGE})
    rating = serializers.IntegerField(error_messages={"required": REQUIRED_MESSAGE})
    comment = serializers.CharField(
        error_messages={"required": REQUIRED_MESSAGE, "blank": REQUIRED_MESSAGE}
    )


class ReviewSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)
    order_id = serializers.UUIDField(read_only=True)
    user_name = serializers.CharField(source="user.name", read_only=True)

    class Meta:
        model = Review
        fields = [
            "id",
            "product_id",
            "order_id",
            "user_name",
            "rating",
            "comment",
            "is_approved",
            "helpful_count",
            "created_at",
        ]
        read_only_fields = fields


class AdminReviewSerializer(ReviewSerializer):
    """Adds who wrote the review and which product it is about."""

    user_id = serializers.UUIDField(read_only=True)
    user_email = serializers.EmailField(source="user.email", read_only=True)
    product_title = serializers.CharField(source="product.title", read_only=True)
    product_slug = serializers.CharField(source="product.slug", read_only=True)

    class Meta(ReviewSerializer.Meta):
        fields = ReviewSerializer.Meta.fields + [
            "user_id",
            "user_email",
            "product_title",
            "product_slug",
            "updated_at",
        ]
        read_only_fields = fields
