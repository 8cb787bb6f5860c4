from django.urls import path
from .views import (
    DeckDueView,
    DueCardsView,
    ProgressView,
    ReviewView,
    StudySessionRatingView,
    StudySessionView,
    UserSettingsView,
    UserStatsView,
)

urlpatterns = [
    path("reviews", ReviewView.as_view(), name="review"),
    path("users/<int:user_id>/due-cards", DueCardsView.as_view(), name="due-cards"),
    path("users/<int:user_id>/decks/due", DeckDueView.as_view(), name="deck-due"),
    path("users/<int:user_id>/cards/<int:card_id>/progress", ProgressView.as_view(), name="progress"),
    path("users/<int:user_id>/settings", UserSettingsView.as_view(), name="user-settings"),
    path("users/<int:user_id>/stats", UserStatsView.as_view(), name="user-stats"),
    path("users/<int:user_id>/study-session", StudySessionView.as_view(), name="study-session"),
    path("users/<int:user_id>/study-session/ratings", StudySessionRatingView.as_view(), name="study-session-rating"),
]
