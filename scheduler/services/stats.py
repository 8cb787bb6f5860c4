from datetime import date, timedelta
from typing import Optional, Tuple

from vocab.models import UserStats


def advance_streak(
    current: int, longest: int, last_study_date: Optional[date], today: date
) -> Tuple[int, int]:
    """Return (current, longest) streak after studying on ``today``."""
    if last_study_date is None:
        current = 1
    elif last_study_date == today:
        current = max(current, 1)
    elif last_study_date == today - timedelta(days=1):
        current += 1
    else:
        current = 1
    return current, max(longest, current)


def record_study_activity(user_id, correct: bool, first_review: bool, today: date):
    """Count one applied rating. Runs inside the rating transaction."""
    stats, _ = UserStats.objects.select_for_update().get_or_create(user_id=user_id)
    stats.total_reviews += 1
    if correct:
        stats.total_correct += 1
    if first_review:
        stats.cards_learned += 1
    stats.current_streak, stats.longest_streak = advance_streak(
        stats.current_streak, stats.longest_streak, stats.last_study_date, today
    )
    stats.last_study_date = today
    stats.save()
    return stats


def get_stats(user_id):
    stats = UserStats.objects.filter(user_id=user_id).first()
    if stats is None:
        stats = UserStats(user_id=user_id)
    return stats
