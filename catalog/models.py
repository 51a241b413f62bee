"""Catalog app models.

Defines the Product model. Stock (``available_quantity``) is only ever
changed through the guarded operations in ``catalog.services`` and can never
go below zero; a database check constraint backs that up.
"""

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    """A raw material listed by a supplier."""

    class Category(models.TextChoices):
        VEGETABLES = "vegetables", "vegetables"
        FRUITS = "fruits", "fruits"
        GRAINS_CEREALS = "grains_cereals", "grains_cereals"
        DAIRY = "dairy", "dairy"
        MEAT_POULTRY = "meat_poultry", "meat_poultry"
        SEAFOOD = "seafood", "seafood"
        SPICES_HERBS = "spices_herbs", "spices_herbs"
        PACKAGED_GOODS = "packaged_goods", "packaged_goods"
        OILS_FATS = "oils_fats", "oils_fats"
        BEVERAGES = "beverages", "beverages"
        SNACKS = "snacks", "snacks"
        OTHER = "other", "other"

    class Unit(models.TextChoices):
        KG = "kg", "kg"
        GRAMS = "grams", "grams"
        LITERS = "liters", "liters"
        PIECES = "pieces", "pieces"
        PACKETS = "packets", "packets"
        BOXES = "boxes", "boxes"

    class QualityGrade(models.TextChoices):
        A = "A", "A"
        B = "B", "B"
        C = "C", "C"

    supplier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="products",
    )
    name = models.CharField(max_length=100)
    description = models.TextField(max_length=500)
    category = models.CharField(max_length=20, choices=Category.choices)

    price_amount = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)]
    )
    price_unit = models.CharField(max_length=10, choices=Unit.choices)
    minimum_order_quantity = models.PositiveIntegerField(
        default=1, validators=[MinValueValidator(1)]
    )
    available_quantity = models.PositiveIntegerField(default=0)

    quality_grade = models.CharField(
        max_length=1, choices=QualityGrade.choices, default=QualityGrade.B
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["-id"]
        indexes = [
            models.Index(fields=["category", "is_active"], name="product_category_active_idx"),
            models.Index(fields=["supplier", "is_active"], name="product_supplier_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(available_quantity__gte=0),
                name="product_available_quantity_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(minimum_order_quantity__gte=1),
                name="product_minimum_order_quantity_positive",
            ),
        ]

    def __str__(self):
        return f"{self.name} (#{self.pk})"

    @property
    def formatted_price(self) -> str:
        return f"₹{self.price_amount}/{self.price_unit}"
