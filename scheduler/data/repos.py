from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import transaction, IntegrityError

from vocab.models import Card, Deck
from .models import StudyProgress, ReviewLog
from ..config import INTERVAL_PRECISION
from ..domain.due import DueCandidate
from ..domain.errors import CardNotFound, ConcurrentUpdateConflict, UserNotFound
from ..domain.logic import ReviewProgress

_INTERVAL_QUANTUM = Decimal(1).scaleb(-INTERVAL_PRECISION)


def interval_to_decimal(interval) -> Decimal:
    return Decimal(str(interval)).quantize(_INTERVAL_QUANTUM)


def to_domain(row) -> ReviewProgress:
    return ReviewProgress(
        user_id=row.user_id,
        card_id=row.card_id,
        ease=row.ease,
        interval=float(row.interval),
        reviews=row.reviews,
        lapses=row.lapses,
        last_reviewed=row.last_reviewed,
        next_review=row.next_review,
    )


def log_to_domain(log) -> ReviewProgress:
    return ReviewProgress(
        user_id=log.user_id,
        card_id=log.card_id,
        ease=log.ease,
        interval=float(log.interval),
        reviews=log.reviews,
        lapses=log.lapses,
        last_reviewed=log.created_at,
        next_review=log.next_review_at,
    )


def get_user(user_id):
    User = get_user_model()
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise UserNotFound(user_id)


def get_card(card_id):
    try:
        return Card.objects.select_related("deck").get(pk=card_id)
    except Card.DoesNotExist:
        raise CardNotFound(card_id)


def get_progress(user_id, card_id):
    return StudyProgress.objects.filter(user_id=user_id, card_id=card_id).first()


def lock_progress(user_id, card_id):
    """
    Fetch the progress row and lock it for update.
    Must be called inside transaction.atomic(); returns None for a new pair.
    """
    return (StudyProgress.objects
            .select_for_update()
            .filter(user_id=user_id, card_id=card_id)
            .first())


def upsert_progress(user_id, card_id, progress: ReviewProgress, expected_reviews=None):
    """
    Write ``progress`` for the pair.

    ``expected_reviews`` is the review count the caller read; the update only
    applies if the stored row still has it. None means the caller saw no row.
    """
    fields = dict(
        ease=progress.ease,
        interval=interval_to_decimal(progress.interval),
        reviews=progress.reviews,
        lapses=progress.lapses,
        last_reviewed=progress.last_reviewed,
        next_review=progress.next_review,
    )
    if expected_reviews is None:
        try:
            with transaction.atomic():
                return StudyProgress.objects.create(user_id=user_id, card_id=card_id, **fields)
        except IntegrityError as exc:
            # Another first rating of the same pair was inserted first
            raise ConcurrentUpdateConflict(user_id, card_id) from exc

    updated = (StudyProgress.objects
               .filter(user_id=user_id, card_id=card_id, reviews=expected_reviews)
               .update(**fields))
    if updated != 1:
        raise ConcurrentUpdateConflict(user_id, card_id)
    return StudyProgress.objects.get(user_id=user_id, card_id=card_id)


def get_existing_idempotent(user_id, card_id, idem_key):
    if not idem_key:
        return None
    return ReviewLog.objects.filter(
        user_id=user_id, card_id=card_id, idempotency_key=idem_key
    ).first()


def find_idempotent_card(user_id, card_ids, idem_key):
    """Card among ``card_ids`` that already has a review logged under ``idem_key``."""
    if not idem_key or not card_ids:
        return None
    return (ReviewLog.objects
            .filter(user_id=user_id, card_id__in=list(card_ids), idempotency_key=idem_key)
            .values_list("card_id", flat=True)
            .first())


def persist_review(user_id, card_id, rating, idem_key, progress: ReviewProgress):
    """
    Insert ReviewLog; a concurrent duplicate idempotency key is a conflict,
    the retried cycle then replays the stored result.
    """
    try:
        with transaction.atomic():
            return ReviewLog.objects.create(
                user_id=user_id, card_id=card_id, rating=rating,
                idempotency_key=idem_key or None,
                created_at=progress.last_reviewed,
                ease=progress.ease,
                interval=interval_to_decimal(progress.interval),
                reviews=progress.reviews,
                lapses=progress.lapses,
                next_review_at=progress.next_review,
            )
    except IntegrityError as exc:
        raise ConcurrentUpdateConflict(user_id, card_id) from exc


def touch_deck(deck_id, studied_at):
    Deck.objects.filter(pk=deck_id).update(last_studied=studied_at)


def get_cards_by_deck(deck_ids):
    return list(
        Card.objects.filter(deck_id__in=list(deck_ids))
        .order_by("id")
        .values_list("id", flat=True)
    )


def get_due_candidates(card_ids):
    rows = Card.objects.filter(id__in=list(card_ids)).values_list("id", "created_at")
    return [DueCandidate(card_id=card_id, created_at=created_at) for card_id, created_at in rows]


def get_next_reviews(user_id, card_ids):
    return dict(
        StudyProgress.objects
        .filter(user_id=user_id, card_id__in=list(card_ids))
        .values_list("card_id", "next_review")
    )
