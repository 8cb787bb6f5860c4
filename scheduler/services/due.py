from django.utils import timezone
import structlog

from vocab.models import Deck
from ..data.repos import get_cards_by_deck, get_due_candidates, get_next_reviews, get_user
from ..domain.due import select_due

logger = structlog.get_logger()


def get_due(user_id, card_ids, now=None):
    """Ids of the due cards among ``card_ids``, newest card first."""
    now = now or timezone.now()
    card_ids = set(card_ids)
    if not card_ids:
        return []
    candidates = get_due_candidates(card_ids)
    next_reviews = get_next_reviews(user_id, card_ids)
    return select_due(candidates, next_reviews, now)


def get_due_cards(user_id, deck_ids, now=None):
    get_user(user_id)
    due = get_due(user_id, get_cards_by_deck(deck_ids), now)
    logger.info("due_cards_selected",
        user_id=str(user_id),
        deck_ids=list(deck_ids),
        card_count=len(due),
    )
    return due


def deck_due_summary(user_id, deck_ids=None, only_due=False, now=None):
    """Due counts for the user's decks (or the given decks)."""
    user = get_user(user_id)
    now = now or timezone.now()
    decks = Deck.objects.filter(user=user) if deck_ids is None else Deck.objects.filter(id__in=deck_ids)

    summary = []
    for deck in decks.order_by("id"):
        due = get_due(user.pk, get_cards_by_deck([deck.pk]), now)
        if only_due and not due:
            continue
        summary.append({
            "deck_id": deck.pk,
            "name": deck.name,
            "last_studied": deck.last_studied,
            "has_due_cards": bool(due),
            "due_card_count": len(due),
        })
    return summary
