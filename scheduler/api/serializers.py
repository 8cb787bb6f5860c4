from rest_framework import serializers

from vocab.models import User, UserStats
from ..domain.enums import Rating
from ..domain.errors import InvalidRating


class RatingField(serializers.CharField):
    """Rating name, case and surrounding whitespace ignored."""

    def to_internal_value(self, data):
        try:
            return Rating.parse(data).value
        except InvalidRating as e:
            raise serializers.ValidationError(str(e))


class ReviewInSerializer(serializers.Serializer):
    user_id = serializers.IntegerField(min_value=1)
    card_id = serializers.IntegerField(min_value=1)
    rating = RatingField()
    idempotency_key = serializers.CharField(max_length=64, required=False)

class DueQuerySerializer(serializers.Serializer):
    deck_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)
    until = serializers.DateTimeField(required=False)  # ISO-8601

class DeckDueQuerySerializer(serializers.Serializer):
    only_due = serializers.BooleanField(required=False, default=False)

class SessionStartSerializer(serializers.Serializer):
    deck_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)

class SessionRatingSerializer(serializers.Serializer):
    rating = RatingField()
    idempotency_key = serializers.CharField(max_length=64, required=False)

class UserSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["interval_modifier"]

class UserStatsSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserStats
        fields = [
            "total_reviews",
            "total_correct",
            "current_streak",
            "longest_streak",
            "last_study_date",
            "cards_learned",
        ]
