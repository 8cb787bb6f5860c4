from dataclasses import dataclass

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone
import structlog

from ..config import EASY_BONUS, RATE_MAX_ATTEMPTS
from ..data.repos import (
    get_card,
    get_existing_idempotent,
    get_progress as fetch_progress,
    get_user,
    lock_progress,
    log_to_domain,
    persist_review,
    to_domain,
    touch_deck,
    upsert_progress,
)
from ..domain.enums import Rating
from ..domain.errors import ConcurrentUpdateConflict, ProgressNotFound, StorageUnavailable
from ..domain.logic import ReviewProgress, apply_rating
from ..utils.time import to_jst_iso
from .stats import record_study_activity

logger = structlog.get_logger()


@dataclass(frozen=True)
class ReviewOutcome:
    progress: ReviewProgress
    rating: Rating
    idempotent: bool


def scheduling_params(user):
    easy_bonus = float(getattr(settings, "SRS_EASY_BONUS", EASY_BONUS))
    return easy_bonus, float(user.interval_modifier)


def rate_card(user_id, card_id, rating, idempotency_key=None, now=None) -> ReviewOutcome:
    rating = Rating.parse(rating)
    now = now or timezone.now()
    logger.info("review_received",
        user_id=str(user_id),
        card_id=str(card_id),
        rating=rating.value,
        idempotency_key=idempotency_key,
    )

    for attempt in range(1, RATE_MAX_ATTEMPTS + 1):
        try:
            return _apply_once(user_id, card_id, rating, idempotency_key, now)
        except ConcurrentUpdateConflict:
            logger.warning("review_conflict",
                user_id=str(user_id),
                card_id=str(card_id),
                attempt=attempt,
            )
            if attempt == RATE_MAX_ATTEMPTS:
                raise
        except DatabaseError as exc:
            logger.error("review_not_saved",
                user_id=str(user_id),
                card_id=str(card_id),
                error=str(exc),
            )
            raise StorageUnavailable("Review not saved, please retry.") from exc


def _apply_once(user_id, card_id, rating, idempotency_key, now):
    with transaction.atomic():
        user = get_user(user_id)
        card = get_card(card_id)

        # Fast path: return previous result if same idempotency_key
        existing = get_existing_idempotent(user.pk, card.pk, idempotency_key)
        if existing:
            logger.info("idempotent_reuse",
                user_id=str(user.pk),
                card_id=str(card.pk),
                next_review_utc=existing.next_review_at.isoformat(),
                next_review_jst=to_jst_iso(existing.next_review_at),
            )
            return ReviewOutcome(log_to_domain(existing), Rating(existing.rating), True)

        # Serialize progress update per (user, card)
        row = lock_progress(user.pk, card.pk)
        current = to_domain(row) if row else None

        easy_bonus, modifier = scheduling_params(user)
        progress = apply_rating(
            current, rating, now,
            user_id=user.pk, card_id=card.pk,
            easy_bonus=easy_bonus, interval_modifier=modifier,
        )

        saved = upsert_progress(
            user.pk, card.pk, progress,
            expected_reviews=row.reviews if row else None,
        )
        persist_review(user.pk, card.pk, rating.value, idempotency_key, progress)
        record_study_activity(
            user.pk,
            correct=rating != Rating.AGAIN,
            first_review=progress.reviews == 1,
            today=timezone.localdate(now),
        )
        touch_deck(card.deck_id, now)

    logger.info("review_scheduled",
        user_id=str(user.pk),
        card_id=str(card.pk),
        rating=rating.value,
        ease=progress.ease,
        interval_days=progress.interval,
        reviews=progress.reviews,
        lapses=progress.lapses,
        next_review_utc=progress.next_review.isoformat(),
        next_review_jst=to_jst_iso(progress.next_review),
    )
    return ReviewOutcome(to_domain(saved), rating, False)


def get_progress(user_id, card_id) -> ReviewProgress:
    row = fetch_progress(user_id, card_id)
    if row is None:
        raise ProgressNotFound(user_id, card_id)
    return to_domain(row)
