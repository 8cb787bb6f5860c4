from enum import Enum

from .errors import InvalidRating


class Rating(str, Enum):
    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidRating(value)


RATING_LABELS = {
    Rating.AGAIN: "もう一度",
    Rating.HARD: "難しい",
    Rating.GOOD: "正解",
    Rating.EASY: "簡単",
}
