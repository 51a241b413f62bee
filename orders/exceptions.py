"""Order engine errors."""

from common.exceptions import BusinessRuleViolation, Forbidden, NotFound


class OrderNotFound(NotFound):
    code = "order_not_found"
    default_message = "Order not found."


class TransitionForbidden(Forbidden):
    code = "transition_forbidden"
    default_message = "You are not allowed to set this status."


class RejectionReasonRequired(BusinessRuleViolation):
    code = "rejection_reason_required"
    default_message = "A reason is required to reject an order."
