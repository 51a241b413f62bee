"""Review errors."""

from common.exceptions import BusinessRuleViolation, Conflict, Forbidden, NotFound


class ReviewNotAllowed(BusinessRuleViolation):
    code = "review_not_allowed"
    default_message = "Only delivered orders can be reviewed."


class DuplicateReview(Conflict):
    code = "duplicate_review"
    default_message = "You have already reviewed this order."


class ReviewNotFound(NotFound):
    code = "review_not_found"
    default_message = "Review not found."


class ResponseAlreadyExists(Conflict):
    code = "response_exists"
    default_message = "A response already exists for this review."


class OwnReviewVote(Forbidden):
    code = "own_review_vote"
    default_message = "You cannot mark your own review as helpful."
