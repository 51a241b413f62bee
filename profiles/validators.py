"""Validators for licence numbers and Indian postal data."""

from django.core.validators import RegexValidator

validate_fssai_number = RegexValidator(
    regex=r"^\d{14}$",
    message="FSSAI number must be exactly 14 digits.",
    code="invalid_fssai",
)

validate_pincode = RegexValidator(
    regex=r"^\d{6}$",
    message="Valid 6-digit pincode is required.",
    code="invalid_pincode",
)
