from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from rest_framework.authtoken.models import Token

from profiles.models import Profile

GUESTS = {
    "vendor": {
        "username": "ramesh",
        "password": "Chaat@2024",
        "email": "ramesh@example.com",
        "profile": {"phone": "9876543210", "city": "Mumbai", "vendor_type": "street_food"},
    },
    "supplier": {
        "username": "freshmandi",
        "password": "Mandi@2024",
        "email": "orders@freshmandi.example.com",
        "profile": {
            "phone": "9123456780",
            "city": "Mumbai",
            "business_name": "Fresh Mandi Traders",
            "fssai_number": "12345678901234",
            "is_verified": True,
        },
    },
}


class Command(BaseCommand):
    help = "Create or update demo vendor and supplier accounts."

    def handle(self, *args, **options):
        User = get_user_model()

        for role, cfg in GUESTS.items():
            u, created = User.objects.get_or_create(
                username=cfg["username"],
                defaults={"email": cfg["email"]},
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f"Created user '{u.username}'"))
            else:
                self.stdout.write(f"User '{u.username}' already exists")

            # set (or reset) password to the documented demo value
            u.set_password(cfg["password"])
            u.save(update_fields=["password"])

            # ensure profile with the correct role and variant fields
            Profile.objects.update_or_create(
                user=u, defaults={"role": role, **cfg["profile"]}
            )

            token, _ = Token.objects.get_or_create(user=u)
            self.stdout.write(f"  -> role={role}, token={token.key}")

        self.stdout.write(self.style.SUCCESS("Demo users ready."))
