from datetime import timedelta

import pytest
from django.utils import timezone

from vocab.models import Card, Deck, User


@pytest.fixture
def now():
    return timezone.now().replace(microsecond=0)


@pytest.fixture
def user(db):
    return User.objects.create_user(username="learner")


@pytest.fixture
def deck(user):
    return Deck.objects.create(name="JLPT N5 Verbs", user=user)


@pytest.fixture
def make_card(deck):
    """Create cards in creation order, each one minute newer than the last."""
    base = timezone.now() - timedelta(days=30)
    counter = {"n": 0}

    def _make(front="食べる", back="to eat", target_deck=None):
        counter["n"] += 1
        return Card.objects.create(
            deck=target_deck or deck,
            front=front,
            back=back,
            created_at=base + timedelta(minutes=counter["n"]),
        )

    return _make


@pytest.fixture
def card(make_card):
    return make_card()
