"""Category and Product models.

Rules kept at this layer:
- ``slug`` is unique and derived from the name/title when left blank.
- ``sale_price``, when set, must be lower than ``price``.
- ``stock`` is a non-negative integer; the database enforces it with a
  CHECK constraint and every decrement goes through a conditional UPDATE
  in the repository.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.text import slugify

from modules.core.models import BaseModel
from modules.products.constants import DEFAULT_SIZE, Fabric, Occasion, Pattern

logger = structlog.get_logger(__name__)


class Category(BaseModel):
    name = models.CharField(max_length=120, unique=True)
    slug = models.SlugField(max_length=140, unique=True)
    description = models.TextField()
    image = models.CharField(max_length=500, blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "categories"
        ordering = ["-created_at"]
        verbose_name_plural = "categories"

    def save(self, *args, **kwargs) -> None:
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.name


class Product(BaseModel):
    """A saree listed by a vendor.

    ``effective_price`` (sale price when set, else list price) is what the
    shopper pays and what the catalog filters on.
    """

    vendor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="products",
    )
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=280, unique=True)
    description = models.TextField()
    categories = models.ManyToManyField(
        "products.Category",
        related_name="products",
        blank=True,
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    sale_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    stock = models.PositiveIntegerField(default=0)
    images = models.JSONField(default=list, blank=True)
    fabric = models.CharField(max_length=20, choices=Fabric.choices)
    color = models.CharField(max_length=60)
    size = models.CharField(max_length=40, default=DEFAULT_SIZE)
    pattern = models.CharField(max_length=20, choices=Pattern.choices)
    occasion = models.CharField(max_length=20, choices=Occasion.choices)
    rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        default=Decimal("0.0"),
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    reviews_count = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "products"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active"], name="products_active_idx"),
            models.Index(fields=["price"], name="products_price_idx"),
            models.Index(fields=["-rating"], name="products_rating_idx"),
            models.Index(fields=["fabric"], name="products_fabric_idx"),
            models.Index(fields=["occasion"], name="products_occasion_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="products_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(sale_price__isnull=True)
                | models.Q(sale_price__lt=models.F("price")),
                name="products_sale_below_price",
            ),
        ]

    @property
    def effective_price(self) -> Decimal:
        return self.sale_price if self.sale_price is not None else self.price

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else ""

    def clean(self) -> None:
        super().clean()
        if (
            self.sale_price is not None
            and self.price is not None
            and self.sale_price >= self.price
        ):
            raise ValidationError(
                {"sale_price": "Sale price must be less than regular price"}
            )

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if not self.slug:
            self.slug = self._unique_slug()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                slug=self.slug,
                vendor_id=str(self.vendor_id),
            )

    def _unique_slug(self) -> str:
        base = slugify(self.title) or "saree"
        candidate = base
        suffix = 2
        while Product.objects.filter(slug=candidate).exclude(pk=self.pk).exists():
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def __str__(self) -> str:
        return f"{self.title} ({self.stock} in stock)"
