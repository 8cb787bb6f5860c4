from datetime import timedelta

import pytest

from scheduler.data.models import ReviewLog, StudyProgress
from scheduler.domain.errors import CardNotFound, InvalidRating, SessionCardMissing, SessionComplete
from scheduler.domain.session import StudySession
from scheduler.services.due import get_due_cards
from scheduler.services.sessions import start_session, submit_rating
from vocab.models import Card


def make_session(remaining=(3, 2, 1), completed=()):
    return StudySession(user_id=7, deck_ids=(1,), remaining=remaining, completed=completed)


def test_current_card_is_first_remaining():
    session = make_session()
    assert session.current_card_id == 3
    assert not session.is_complete


def test_complete_card_moves_it_out_of_the_pool():
    session = make_session().complete_card(3)

    assert session.remaining == (2, 1)
    assert session.completed == (3,)
    assert session.current_card_id == 2
    assert session.completion == pytest.approx(1 / 3)


def test_complete_card_returns_new_session():
    original = make_session()
    original.complete_card(3)
    assert original.remaining == (3, 2, 1)


def test_session_completes_when_pool_is_empty():
    session = make_session(remaining=(1,)).complete_card(1)
    assert session.is_complete
    assert session.current_card_id is None
    assert session.completion == 1.0

    with pytest.raises(SessionComplete):
        session.complete_card(1)


def test_drop_card_does_not_count_as_studied():
    session = make_session(completed=(4,)).drop_card(3)

    assert session.remaining == (2, 1)
    assert session.completed == (4,)
    assert session.total == 3


def test_card_not_in_pool():
    with pytest.raises(ValueError):
        make_session().complete_card(99)


def test_empty_session_is_complete():
    session = make_session(remaining=())
    assert session.is_complete
    assert session.total == 0
    assert session.completion == 1.0


def test_session_survives_storage_in_a_dict():
    session = make_session(remaining=(2, 1), completed=(3,))
    assert StudySession.from_dict(session.to_dict()) == session


# Sessions over the database

@pytest.mark.django_db
def test_start_session_uses_due_cards(user, deck, make_card, now):
    cards = [make_card(f"語{i}") for i in range(3)]

    session = start_session(user.pk, [deck.pk], now)

    assert session.remaining == tuple(c.pk for c in reversed(cards))
    assert session.completed == ()


@pytest.mark.django_db
def test_again_is_not_requeued_in_the_same_session(user, deck, make_card, now):
    first, second = make_card("飲む"), make_card("行く")
    session = start_session(user.pk, [deck.pk], now)
    current = session.current_card_id

    session, outcome = submit_rating(session, "again", now=now)

    assert outcome.progress.card_id == current
    assert outcome.progress.lapses == 1
    assert current not in session.remaining
    assert current in session.completed

    session, _ = submit_rating(session, "good", now=now)
    assert session.is_complete
    assert set(session.completed) == {first.pk, second.pk}

    # short "again" interval: due again in a later session
    assert current in get_due_cards(user.pk, [deck.pk], now + timedelta(hours=3))


@pytest.mark.django_db
def test_rating_a_complete_session(user, deck, now):
    session = start_session(user.pk, [deck.pk], now)
    assert session.is_complete
    with pytest.raises(SessionComplete):
        submit_rating(session, "good", now=now)


@pytest.mark.django_db
def test_failed_rating_keeps_the_card_pending(user, deck, make_card, now):
    card = make_card()
    session = start_session(user.pk, [deck.pk], now)

    with pytest.raises(InvalidRating):
        submit_rating(session, "meh", now=now)

    assert session.current_card_id == card.pk
    assert not StudyProgress.objects.exists()


@pytest.mark.django_db
def test_deleted_card_is_dropped_from_the_session(user, deck, make_card, now):
    first, second = make_card("飲む"), make_card("行く")
    session = start_session(user.pk, [deck.pk], now)
    Card.objects.filter(pk=second.pk).delete()

    with pytest.raises(SessionCardMissing) as exc:
        submit_rating(session, "good", now=now)

    assert isinstance(exc.value, CardNotFound)
    session = exc.value.session
    assert session.remaining == (first.pk,)
    assert session.completed == ()

    session, outcome = submit_rating(session, "good", now=now)
    assert outcome.progress.card_id == first.pk
    assert session.is_complete
    assert session.completed == (first.pk,)


@pytest.mark.django_db
def test_retried_key_replays_the_completed_card(user, deck, make_card, now):
    first, second = make_card("飲む"), make_card("行く")
    session = start_session(user.pk, [deck.pk], now)

    after_first, outcome = submit_rating(session, "good", "key-1", now=now)
    assert outcome.progress.card_id == second.pk

    # response was lost; client retries against the advanced session
    replayed_session, replay = submit_rating(after_first, "good", "key-1", now=now)

    assert replay.idempotent is True
    assert replay.progress.card_id == second.pk
    assert replayed_session == after_first
    assert not StudyProgress.objects.filter(card=first).exists()
    assert ReviewLog.objects.count() == 1


@pytest.mark.django_db
def test_retried_key_after_the_last_card(user, deck, card, now):
    session = start_session(user.pk, [deck.pk], now)
    done, _ = submit_rating(session, "easy", "key-last", now=now)
    assert done.is_complete

    same, replay = submit_rating(done, "easy", "key-last", now=now)

    assert same == done
    assert replay.idempotent is True
    assert replay.progress.reviews == 1
