import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def rating_validators():
    return [django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("orders", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Review",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rating", models.PositiveSmallIntegerField(validators=rating_validators())),
                ("comment", models.TextField(max_length=1000, validators=[django.core.validators.MinLengthValidator(10)])),
                ("quality_rating", models.PositiveSmallIntegerField(blank=True, null=True, validators=rating_validators())),
                ("delivery_rating", models.PositiveSmallIntegerField(blank=True, null=True, validators=rating_validators())),
                ("communication_rating", models.PositiveSmallIntegerField(blank=True, null=True, validators=rating_validators())),
                ("value_rating", models.PositiveSmallIntegerField(blank=True, null=True, validators=rating_validators())),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="reviews", to="orders.order")),
                ("supplier", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="reviews_received", to=settings.AUTH_USER_MODEL)),
                ("vendor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="reviews_written", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "constraints": [
                    models.UniqueConstraint(fields=("vendor", "supplier", "order"), name="unique_review_per_vendor_supplier_order"),
                    models.CheckConstraint(condition=models.Q(("rating__gte", 1), ("rating__lte", 5)), name="review_rating_between_1_and_5"),
                ],
            },
        ),
    ]
