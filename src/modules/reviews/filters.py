import django_filters

from modules.reviews.models import Review


class ProductReviewFilter(django_filters.FilterSet):
    """Public listing: the product is mandatory."""

    productId = django_filters.UUIDFilter(
        field_name="product_id",
        required=True,
        error_messages={
            "required": "Product ID is required",
            "invalid": "Invalid product ID",
        },
    )

    class Meta:
        model = Review
        fields = ["productId"]


class ReviewFilter(django_filters.FilterSet):
    """Back-office moderation queue filters."""

    productId = django_filters.UUIDFilter(field_name="product_id")
    approved = django_filters.BooleanFilter(field_name="is_approved")
    rating = django_filters.NumberFilter(field_name="rating")

    class Meta:
        model = Review
        fields = ["productId", "approved", "rating"]
