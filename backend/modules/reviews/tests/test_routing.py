# backend/modules/reviews/tests/test_routing.py

import pytest

from core.exceptions import InvalidRating
from modules.reviews.services.routing import (
    RoutingDecision,
    decide,
    is_high_rating,
    validate_rating,
)


pytestmark = pytest.mark.unit


class TestValidateRating:

    @pytest.mark.parametrize("rating", [1, 2, 3, 4, 5])
    def test_accepts_star_values(self, rating):
        assert validate_rating(rating) == rating

    @pytest.mark.parametrize("rating", [0, 6, -1, 100])
    def test_rejects_out_of_range(self, rating):
        with pytest.raises(InvalidRating) as exc_info:
            validate_rating(rating)

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == "INVALID_RATING"
        assert exc_info.value.rating == rating

    @pytest.mark.parametrize("rating", [4.0, "5", None, True, False])
    def test_rejects_non_integers(self, rating):
        with pytest.raises(InvalidRating):
            validate_rating(rating)


class TestDecide:

    @pytest.mark.parametrize(
        "rating,has_target,expected",
        [
            (5, True, RoutingDecision(is_public=True, should_redirect=True)),
            (4, True, RoutingDecision(is_public=True, should_redirect=True)),
            (3, True, RoutingDecision(is_public=False, should_redirect=False)),
            (1, True, RoutingDecision(is_public=False, should_redirect=False)),
            (5, False, RoutingDecision(is_public=True, should_redirect=False)),
            (2, False, RoutingDecision(is_public=False, should_redirect=False)),
        ],
    )
    def test_routing_table(self, rating, has_target, expected):
        assert decide(rating, has_target) == expected

    def test_redirect_implies_public(self):
        for rating in range(1, 6):
            for has_target in (True, False):
                decision = decide(rating, has_target)
                if decision.should_redirect:
                    assert decision.is_public

    def test_custom_threshold(self):
        assert decide(3, True, threshold=3).is_public is True
        assert decide(4, True, threshold=5).is_public is False

    def test_invalid_rating(self):
        with pytest.raises(InvalidRating):
            decide(7, True)


def test_is_high_rating():
    assert is_high_rating(4)
    assert not is_high_rating(3)
    assert is_high_rating(3, threshold=3)
