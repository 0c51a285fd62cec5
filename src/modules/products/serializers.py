"""Product and category DRF serializers.

Output only: request payloads are validated by the pydantic DTOs in
``dtos.py`` before reaching the services.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Category, Product


class ProductSerializer(serializers.ModelSerializer):
    """Full product representation (catalog, detail and back office)."""

    vendor_id = serializers.UUIDField(read_only=True)
    vendor_name = serializers.SerializerMethodField()
    categories = serializers.SlugRelatedField(
        many=True, read_only=True, slug_field="slug"
    )
    effective_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = Product
        fields = [
            "id",
            "vendor_id",
            "vendor_name",
            "title",
            "slug",
            "description",
            "categories",
            "price",
            "sale_price",
            "effective_price",
            "stock",
            "images",
            "fabric",
            "color",
            "size",
            "pattern",
            "occasion",
            "rating",
            "reviews_count",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_vendor_name(self, obj: Product) -> str:
        vendor = obj.vendor
        return vendor.business_name or vendor.name


class CategorySerializer(serializers.ModelSerializer):
    product_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "image",
            "is_active",
            "product_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
