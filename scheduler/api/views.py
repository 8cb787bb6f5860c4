from django.utils import timezone
from rest_framework import views, status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
import structlog
import uuid

from ..data.repos import get_user
from ..domain.enums import RATING_LABELS
from ..domain.errors import SessionCardMissing
from ..domain.session import StudySession
from ..services.due import deck_due_summary, get_due_cards
from ..services.reviews import get_progress, rate_card
from ..services.sessions import start_session, submit_rating
from ..services.stats import get_stats
from ..utils.time import humanize_interval, to_jst_iso
from .serializers import (
    DeckDueQuerySerializer,
    DueQuerySerializer,
    ReviewInSerializer,
    SessionRatingSerializer,
    SessionStartSerializer,
    UserSettingsSerializer,
    UserStatsSerializer,
)

base_logger = structlog.get_logger()


def request_logger():
    # Create a unique request_id
    return base_logger.bind(request_id=str(uuid.uuid4()))


def progress_payload(progress):
    return {
        "user_id": progress.user_id,
        "card_id": progress.card_id,
        "ease": progress.ease,
        "interval": progress.interval,
        "reviews": progress.reviews,
        "lapses": progress.lapses,
        "last_reviewed_utc": progress.last_reviewed.isoformat() if progress.last_reviewed else None,
        "next_review_utc": progress.next_review.isoformat() if progress.next_review else None,
        "next_review_jst": to_jst_iso(progress.next_review) if progress.next_review else None,
        "next_review_in": humanize_interval(progress.interval),
    }


def outcome_payload(outcome):
    payload = progress_payload(outcome.progress)
    payload["rating"] = outcome.rating.value
    payload["rating_label"] = RATING_LABELS[outcome.rating]
    payload["idempotent"] = outcome.idempotent
    return payload


def session_payload(session):
    return {
        "user_id": session.user_id,
        "deck_ids": list(session.deck_ids),
        "remaining": list(session.remaining),
        "completed": list(session.completed),
        "current_card_id": session.current_card_id,
        "is_complete": session.is_complete,
        "completion": session.completion,
    }


def session_key(user_id):
    return f"study_session:{user_id}"


class ReviewView(views.APIView):
    def post(self, request):
        logger = request_logger()

        s = ReviewInSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        user_id = s.validated_data["user_id"]
        card_id = s.validated_data["card_id"]
        rating = s.validated_data["rating"]
        idem = s.validated_data.get("idempotency_key")

        outcome = rate_card(user_id, card_id, rating, idem)
        status_code = status.HTTP_200_OK if outcome.idempotent else status.HTTP_201_CREATED

        # Log with request_id & relevant context
        logger.info(
            "review_api_response",
            user_id=str(user_id),
            card_id=str(card_id),
            rating=rating,
            idempotent=outcome.idempotent,
            interval_days=outcome.progress.interval,
            next_review_utc=outcome.progress.next_review.isoformat(),
            status=status_code,
        )

        return Response(outcome_payload(outcome), status=status_code)


class DueCardsView(views.APIView):
    def get(self, request, user_id):
        logger = request_logger()

        qs = DueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        deck_ids = qs.validated_data["deck_ids"]
        until = qs.validated_data.get("until") or timezone.now()

        results = get_due_cards(user_id, deck_ids, until)

        logger.info(
            "due_cards_api_response",
            user_id=str(user_id),
            until_utc=until.isoformat(),
            until_jst=to_jst_iso(until),
            card_count=len(results),
        )

        return Response(
            {
                "user_id": user_id,
                "deck_ids": deck_ids,
                "until_utc": until.isoformat(),
                "until_jst": to_jst_iso(until),
                "card_ids": results,
            }
        )


class DeckDueView(views.APIView):
    def get(self, request, user_id):
        qs = DeckDueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)

        decks = deck_due_summary(user_id, only_due=qs.validated_data["only_due"])
        for deck in decks:
            studied = deck.pop("last_studied")
            deck["last_studied_utc"] = studied.isoformat() if studied else None

        request_logger().info(
            "deck_due_api_response", user_id=str(user_id), deck_count=len(decks)
        )
        return Response({"user_id": user_id, "decks": decks})


class ProgressView(views.APIView):
    def get(self, request, user_id, card_id):
        return Response(progress_payload(get_progress(user_id, card_id)))


class UserSettingsView(views.APIView):
    def get(self, request, user_id):
        return Response(UserSettingsSerializer(get_user(user_id)).data)

    def patch(self, request, user_id):
        user = get_user(user_id)
        s = UserSettingsSerializer(user, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        s.save()
        request_logger().info(
            "user_settings_updated",
            user_id=str(user_id),
            interval_modifier=str(user.interval_modifier),
        )
        return Response(s.data)


class UserStatsView(views.APIView):
    def get(self, request, user_id):
        get_user(user_id)
        return Response(UserStatsSerializer(get_stats(user_id)).data)


class StudySessionView(views.APIView):
    def get(self, request, user_id):
        data = request.session.get(session_key(user_id))
        if data is None:
            raise NotFound("No active study session")
        return Response(session_payload(StudySession.from_dict(data)))

    def post(self, request, user_id):
        s = SessionStartSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        session = start_session(user_id, s.validated_data["deck_ids"])
        request.session[session_key(user_id)] = session.to_dict()
        return Response(session_payload(session), status=status.HTTP_201_CREATED)


class StudySessionRatingView(views.APIView):
    def post(self, request, user_id):
        logger = request_logger()

        data = request.session.get(session_key(user_id))
        if data is None:
            raise NotFound("No active study session")

        s = SessionRatingSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            session, outcome = submit_rating(
                StudySession.from_dict(data),
                s.validated_data["rating"],
                s.validated_data.get("idempotency_key"),
            )
        except SessionCardMissing as e:
            # Keep the session moving past the deleted card
            request.session[session_key(user_id)] = e.session.to_dict()
            raise
        request.session[session_key(user_id)] = session.to_dict()

        logger.info(
            "session_rating_api_response",
            user_id=str(user_id),
            card_id=str(outcome.progress.card_id),
            idempotent=outcome.idempotent,
            remaining=len(session.remaining),
        )
        return Response(
            {"review": outcome_payload(outcome), "session": session_payload(session)},
            status=status.HTTP_200_OK if outcome.idempotent else status.HTTP_201_CREATED,
        )
