import decimal
import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

STATUS_CHOICES = [
    ("pending", "pending"),
    ("accepted", "accepted"),
    ("rejected", "rejected"),
    ("processing", "processing"),
    ("shipped", "shipped"),
    ("delivered", "delivered"),
    ("cancelled", "cancelled"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Checkout",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("reference", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ("idempotency_key", models.CharField(blank=True, max_length=64, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("vendor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="checkouts", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("idempotency_key__isnull", False)),
                        fields=("vendor", "idempotency_key"),
                        name="unique_checkout_idempotency_key",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_number", models.CharField(editable=False, max_length=40, unique=True)),
                ("status", models.CharField(choices=STATUS_CHOICES, default="pending", max_length=20)),
                ("total_amount", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), editable=False, max_digits=12)),
                ("total_items", models.PositiveIntegerField(default=0, editable=False)),
                ("delivery_street", models.CharField(max_length=200)),
                ("delivery_city", models.CharField(max_length=100)),
                ("delivery_state", models.CharField(max_length=100)),
                ("delivery_pincode", models.CharField(max_length=6)),
                ("expected_delivery_date", models.DateTimeField(blank=True, null=True)),
                ("actual_delivery_date", models.DateTimeField(blank=True, null=True)),
                ("payment_method", models.CharField(choices=[("cash_on_delivery", "cash_on_delivery"), ("online", "online"), ("bank_transfer", "bank_transfer")], default="cash_on_delivery", max_length=20)),
                ("payment_status", models.CharField(choices=[("pending", "pending"), ("paid", "paid"), ("failed", "failed"), ("refunded", "refunded")], default="pending", max_length=20)),
                ("vendor_notes", models.CharField(blank=True, default="", max_length=500)),
                ("supplier_notes", models.CharField(blank=True, default="", max_length=500)),
                ("rejection_reason", models.CharField(blank=True, default="", max_length=500)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("checkout", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="orders", to="orders.checkout")),
                ("supplier", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="orders_received", to=settings.AUTH_USER_MODEL)),
                ("vendor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="orders_placed", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [
                    models.Index(fields=["vendor", "status"], name="order_vendor_status_idx"),
                    models.Index(fields=["supplier", "status"], name="order_supplier_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_name", models.CharField(max_length=100)),
                ("quantity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("price_unit", models.CharField(choices=[("kg", "kg"), ("grams", "grams"), ("liters", "liters"), ("pieces", "pieces"), ("packets", "packets"), ("boxes", "boxes")], max_length=10)),
                ("line_total", models.DecimalField(decimal_places=2, editable=False, max_digits=12)),
                ("notes", models.CharField(blank=True, default="", max_length=200)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.order")),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="order_items", to="catalog.product")),
                ("supplier", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="order_items_supplied", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("id",),
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("quantity__gte", 1)), name="order_item_quantity_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderStatusHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=STATUS_CHOICES, max_length=20)),
                ("notes", models.CharField(blank=True, default="", max_length=500)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("changed_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="status_history", to="orders.order")),
            ],
            options={
                "ordering": ("created_at", "id"),
                "verbose_name_plural": "order status history",
            },
        ),
    ]
