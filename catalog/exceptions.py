"""Catalog errors raised by stock operations and product lookups."""

from common.exceptions import BusinessRuleViolation, NotFound, Unavailable


class ProductNotFound(NotFound):
    code = "product_not_found"
    default_message = "Product not found or unavailable."


class ProductUnavailable(Unavailable):
    code = "product_unavailable"
    default_message = "Product is no longer available."


class InsufficientStock(BusinessRuleViolation):
    code = "insufficient_stock"
    default_message = "Insufficient stock."
