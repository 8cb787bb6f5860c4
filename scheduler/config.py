DEFAULT_EASE = 250
MIN_EASE = 130
MAX_EASE = 370
EASE_DELTA = {
    "again": -20,
    "hard": -15,
    "good": 0,
    "easy": 15,
}

AGAIN_INTERVAL = 0.1   # days, ~2.4 hours
INITIAL_INTERVAL = 1.0  # days
FIRST_INTERVAL = {
    "again": AGAIN_INTERVAL,
    "hard": 0.5,
    "good": INITIAL_INTERVAL,
}
HARD_FACTOR = 0.5
EASY_BONUS = 2.0

INTERVAL_MODIFIER = 1.0
MIN_INTERVAL_MODIFIER = 0.5
MAX_INTERVAL_MODIFIER = 2.0

MAX_INTERVAL_DAYS = 36500
INTERVAL_PRECISION = 4  # decimal places stored

RATE_MAX_ATTEMPTS = 3
