import decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import profiles.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(choices=[("vendor", "vendor"), ("supplier", "supplier")], max_length=20)),
                ("phone", models.CharField(blank=True, default="", max_length=20)),
                ("street", models.CharField(blank=True, default="", max_length=255)),
                ("city", models.CharField(blank=True, default="", max_length=100)),
                ("state", models.CharField(blank=True, default="", max_length=100)),
                ("pincode", models.CharField(blank=True, default="", max_length=6, validators=[profiles.validators.validate_pincode])),
                ("business_name", models.CharField(blank=True, default="", max_length=200)),
                ("fssai_number", models.CharField(blank=True, default="", max_length=14, validators=[profiles.validators.validate_fssai_number])),
                ("is_verified", models.BooleanField(default=False)),
                ("average_rating", models.DecimalField(decimal_places=1, default=decimal.Decimal("0.0"), max_digits=2)),
                ("total_reviews", models.PositiveIntegerField(default=0)),
                ("vendor_type", models.CharField(blank=True, choices=[("street_food", "street_food"), ("restaurant", "restaurant"), ("cafe", "cafe"), ("catering", "catering")], default="", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="profile", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "indexes": [models.Index(fields=["role", "is_verified"], name="profile_role_verified_idx")],
            },
        ),
    ]
