from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from ..config import DEFAULT_EASE


class StudyProgress(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="progress"
    )
    card = models.ForeignKey(
        "vocab.Card", on_delete=models.CASCADE, related_name="progress"
    )
    ease = models.PositiveSmallIntegerField(default=DEFAULT_EASE)
    # Fractional days; 0.1 day is a meaningful interval
    interval = models.DecimalField(max_digits=12, decimal_places=4, default=Decimal("0"))
    reviews = models.PositiveIntegerField(default=0)
    lapses = models.PositiveIntegerField(default=0)
    last_reviewed = models.DateTimeField(null=True, blank=True)
    next_review = models.DateTimeField(null=True, blank=True)  # UTC

    class Meta:
        db_table = "study_progress"
        constraints = [
            models.UniqueConstraint(fields=["user", "card"], name="unique_user_card_progress"),
        ]
        indexes = [
            models.Index(fields=["user", "next_review"], name="progress_user_next_idx"),
        ]


class ReviewLog(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="review_logs"
    )
    card = models.ForeignKey(
        "vocab.Card", on_delete=models.CASCADE, related_name="review_logs"
    )
    rating = models.CharField(max_length=8)
    idempotency_key = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    ease = models.PositiveSmallIntegerField()
    interval = models.DecimalField(max_digits=12, decimal_places=4)
    reviews = models.PositiveIntegerField()
    lapses = models.PositiveIntegerField()
    next_review_at = models.DateTimeField()

    class Meta:
        db_table = "review_log"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "card", "idempotency_key"],
                name="unique_review_idempotency_key",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "card", "created_at"], name="review_log_user_card_idx"),
        ]
