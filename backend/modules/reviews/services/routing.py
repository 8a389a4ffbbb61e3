# backend/modules/reviews/services/routing.py

"""
Rating routing policy.

Decides, from the star rating alone, whether a review is shown publicly
and whether the submitter should be sent on to the business's public
review platform.
"""

from dataclasses import dataclass

from core.exceptions import InvalidRating

MIN_RATING = 1
MAX_RATING = 5

# Ratings at or above this value are public
DEFAULT_PUBLIC_RATING_THRESHOLD = 4


@dataclass(frozen=True)
class RoutingDecision:
    is_public: bool
    should_redirect: bool


def validate_rating(rating) -> int:
    """Return ``rating`` unchanged if it is an integer star rating, else raise InvalidRating"""
    # bool is an int subclass; True/False are not ratings
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRating(rating)
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRating(rating)
    return rating


def decide(
    rating: int,
    has_redirect_target: bool,
    threshold: int = DEFAULT_PUBLIC_RATING_THRESHOLD,
) -> RoutingDecision:
    """Map a rating to its visibility and redirect decision"""
    validate_rating(rating)
    is_public = rating >= threshold
    return RoutingDecision(
        is_public=is_public,
        should_redirect=is_public and bool(has_redirect_target),
    )


def is_high_rating(rating: int, threshold: int = DEFAULT_PUBLIC_RATING_THRESHOLD) -> bool:
    return rating >= threshold
