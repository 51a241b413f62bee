"""Cart errors."""

from common.exceptions import BusinessRuleViolation, NotFound


class BelowMinimum(BusinessRuleViolation):
    code = "below_minimum"
    default_message = "Quantity is below the minimum order quantity."


class SupplierUnverified(BusinessRuleViolation):
    code = "supplier_unverified"
    default_message = "Can only order from verified suppliers."


class ItemNotFound(NotFound):
    code = "item_not_found"
    default_message = "Item not found in cart."


class EmptyCart(BusinessRuleViolation):
    code = "empty_cart"
    default_message = "Cart is empty."
