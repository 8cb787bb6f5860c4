from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Optional


@dataclass(frozen=True)
class DueCandidate:
    card_id: int
    created_at: datetime


def is_due(next_review: Optional[datetime], now: datetime) -> bool:
    # No record (or no timestamp) means the card has never been scheduled
    return next_review is None or next_review <= now


def select_due(
    candidates: Iterable[DueCandidate],
    next_reviews: Mapping[int, Optional[datetime]],
    now: datetime,
) -> list:
    """Return the ids of the due candidates, newest card first.

    ``next_reviews`` maps card id to the stored next-review timestamp; cards
    missing from it have no progress record and are due.
    """
    due = [c for c in candidates if is_due(next_reviews.get(c.card_id), now)]
    due.sort(key=lambda c: (c.created_at, c.card_id), reverse=True)
    return [c.card_id for c in due]
