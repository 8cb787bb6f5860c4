import structlog

from ..data.repos import find_idempotent_card
from ..domain.enums import Rating
from ..domain.errors import CardNotFound, SessionCardMissing, SessionComplete
from ..domain.session import StudySession
from .due import get_due_cards
from .reviews import rate_card

logger = structlog.get_logger()


def start_session(user_id, deck_ids, now=None) -> StudySession:
    deck_ids = tuple(deck_ids)
    session = StudySession(
        user_id=user_id,
        deck_ids=deck_ids,
        remaining=tuple(get_due_cards(user_id, deck_ids, now)),
    )
    logger.info("study_session_started",
        user_id=str(user_id),
        deck_ids=list(deck_ids),
        card_count=len(session.remaining),
    )
    return session


def submit_rating(session: StudySession, rating, idempotency_key=None, now=None):
    """
    Rate the session's current card and move it to the completed set.
    Returns (next_session, outcome).

    A key already logged for a completed card replays that review and
    leaves the session where it is. If the current card no longer exists
    it is dropped and SessionCardMissing carries the trimmed session.
    Any other error leaves the session unchanged.
    """
    rating = Rating.parse(rating)

    # Retried submission: the session already moved past the rated card
    replayed_card = find_idempotent_card(session.user_id, session.completed, idempotency_key)
    if replayed_card is not None:
        outcome = rate_card(session.user_id, replayed_card, rating, idempotency_key, now)
        logger.info("study_session_rating_replayed",
            user_id=str(session.user_id),
            card_id=str(replayed_card),
            idempotency_key=idempotency_key,
        )
        return session, outcome

    if session.is_complete:
        raise SessionComplete()
    card_id = session.current_card_id

    try:
        outcome = rate_card(session.user_id, card_id, rating, idempotency_key, now)
    except CardNotFound as exc:
        next_session = session.drop_card(card_id)
        logger.warning("study_session_card_missing",
            user_id=str(session.user_id),
            card_id=str(card_id),
            remaining=len(next_session.remaining),
        )
        raise SessionCardMissing(card_id, next_session) from exc
    next_session = session.complete_card(card_id)

    if next_session.is_complete:
        logger.info("study_session_complete",
            user_id=str(session.user_id),
            card_count=next_session.total,
        )
    return next_session, outcome
