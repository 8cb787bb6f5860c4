from decimal import Decimal

from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from scheduler.config import (
    INTERVAL_MODIFIER,
    MAX_INTERVAL_MODIFIER,
    MIN_INTERVAL_MODIFIER,
)


class User(AbstractUser):
    """
    Custom User model that extends the default Django User model.
    Carries the user's interval modifier, which scales every scheduled
    interval except the "again" reset.
    """

    interval_modifier = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        default=Decimal(str(INTERVAL_MODIFIER)),
        validators=[
            MinValueValidator(Decimal(str(MIN_INTERVAL_MODIFIER))),
            MaxValueValidator(Decimal(str(MAX_INTERVAL_MODIFIER))),
        ],
    )


class Deck(models.Model):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    user = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.CASCADE, related_name="decks"
    )
    created_at = models.DateTimeField(default=timezone.now)
    last_studied = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return self.name


class Card(models.Model):
    deck = models.ForeignKey(Deck, on_delete=models.CASCADE, related_name="cards")
    front = models.CharField(max_length=255)
    back = models.TextField()
    reading = models.CharField(max_length=255, blank=True, default="")
    example = models.TextField(blank=True, default="")
    example_translation = models.TextField(blank=True, default="")
    part_of_speech = models.CharField(max_length=100, blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        indexes = [
            models.Index(fields=["deck", "created_at"], name="card_deck_created_idx"),
        ]

    def __str__(self):
        return self.front


class UserStats(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="stats")
    total_reviews = models.PositiveIntegerField(default=0)
    total_correct = models.PositiveIntegerField(default=0)
    current_streak = models.PositiveIntegerField(default=0)
    longest_streak = models.PositiveIntegerField(default=0)
    last_study_date = models.DateField(null=True, blank=True)
    cards_learned = models.PositiveIntegerField(default=0)
