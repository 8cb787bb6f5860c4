from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .enums import Rating
from ..config import (
    AGAIN_INTERVAL,
    DEFAULT_EASE,
    EASE_DELTA,
    EASY_BONUS,
    FIRST_INTERVAL,
    HARD_FACTOR,
    INITIAL_INTERVAL,
    INTERVAL_MODIFIER,
    INTERVAL_PRECISION,
    MAX_EASE,
    MAX_INTERVAL_DAYS,
    MIN_EASE,
)


@dataclass(frozen=True)
class ReviewProgress:
    """Review history of one (user, card) pair."""

    user_id: Optional[int]
    card_id: Optional[int]
    ease: int = DEFAULT_EASE
    interval: float = 0.0
    reviews: int = 0
    lapses: int = 0
    last_reviewed: Optional[datetime] = None
    next_review: Optional[datetime] = None

    @property
    def is_new(self) -> bool:
        return self.reviews == 0


def clamp_ease(ease: int) -> int:
    return max(MIN_EASE, min(MAX_EASE, int(ease)))


def next_ease(ease: int, rating: Rating) -> int:
    return clamp_ease(ease + EASE_DELTA[rating.value])


def next_interval(
    rating: Rating,
    previous_interval: float,
    ease: int,
    is_first: bool,
    easy_bonus: float = EASY_BONUS,
    interval_modifier: float = INTERVAL_MODIFIER,
) -> float:
    # "again" always resets, whatever the history, and ignores the modifier
    if rating == Rating.AGAIN:
        return AGAIN_INTERVAL

    if is_first:
        if rating == Rating.EASY:
            proposed = INITIAL_INTERVAL * easy_bonus
        else:
            proposed = FIRST_INTERVAL[rating.value]
    else:
        multiplier = ease / 100
        if rating == Rating.HARD:
            proposed = previous_interval * HARD_FACTOR
        elif rating == Rating.GOOD:
            proposed = previous_interval * multiplier
        else:
            proposed = previous_interval * multiplier * easy_bonus

    proposed = min(proposed * interval_modifier, MAX_INTERVAL_DAYS)
    return round(max(proposed, 0.0), INTERVAL_PRECISION)


def apply_rating(
    existing: Optional[ReviewProgress],
    rating,
    now: datetime,
    user_id=None,
    card_id=None,
    easy_bonus: float = EASY_BONUS,
    interval_modifier: float = INTERVAL_MODIFIER,
) -> ReviewProgress:
    """Compute the progress that results from rating a card.

    ``existing`` is None for a pair that has never been rated; ``user_id``
    and ``card_id`` then identify the new record. The ease is adjusted
    first and the adjusted ease drives the interval multiplier.
    """
    rating = Rating.parse(rating)
    if existing is None:
        existing = ReviewProgress(user_id=user_id, card_id=card_id)

    is_first = existing.is_new
    ease = next_ease(existing.ease, rating)
    interval = next_interval(
        rating,
        float(existing.interval),
        ease,
        is_first,
        easy_bonus=easy_bonus,
        interval_modifier=interval_modifier,
    )

    return ReviewProgress(
        user_id=existing.user_id,
        card_id=existing.card_id,
        ease=ease,
        interval=interval,
        reviews=existing.reviews + 1,
        lapses=existing.lapses + (1 if rating == Rating.AGAIN else 0),
        last_reviewed=now,
        next_review=now + timedelta(days=interval),
    )
