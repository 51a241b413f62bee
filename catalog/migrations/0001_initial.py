import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("description", models.TextField(max_length=500)),
                ("category", models.CharField(choices=[
                    ("vegetables", "vegetables"), ("fruits", "fruits"), ("grains_cereals", "grains_cereals"),
                    ("dairy", "dairy"), ("meat_poultry", "meat_poultry"), ("seafood", "seafood"),
                    ("spices_herbs", "spices_herbs"), ("packaged_goods", "packaged_goods"),
                    ("oils_fats", "oils_fats"), ("beverages", "beverages"), ("snacks", "snacks"),
                    ("other", "other"),
                ], max_length=20)),
                ("price_amount", models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("price_unit", models.CharField(choices=[("kg", "kg"), ("grams", "grams"), ("liters", "liters"), ("pieces", "pieces"), ("packets", "packets"), ("boxes", "boxes")], max_length=10)),
                ("minimum_order_quantity", models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ("available_quantity", models.PositiveIntegerField(default=0)),
                ("quality_grade", models.CharField(choices=[("A", "A"), ("B", "B"), ("C", "C")], default="B", max_length=1)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("supplier", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="products", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "products",
                "ordering": ["-id"],
                "indexes": [
                    models.Index(fields=["category", "is_active"], name="product_category_active_idx"),
                    models.Index(fields=["supplier", "is_active"], name="product_supplier_active_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("available_quantity__gte", 0)), name="product_available_quantity_non_negative"),
                    models.CheckConstraint(condition=models.Q(("minimum_order_quantity__gte", 1)), name="product_minimum_order_quantity_positive"),
                ],
            },
        ),
    ]
