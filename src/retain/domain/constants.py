"""Centralized constants for the retain scheduler.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Ratings ----------
MIN_RATING = 0
MAX_RATING = 5
PASSING_GRADE = 3  # Ratings >= 3 count as a successful recall

# ---------- Easiness Factor ----------
MIN_EASINESS_FACTOR = 1.3
DEFAULT_EASINESS_FACTOR = 2.5

# ---------- Intervals (days) ----------
FIRST_INTERVAL = 1
SECOND_INTERVAL = 6
FAILED_INTERVAL = 1
SECONDS_PER_DAY = 86400

# ---------- Mastery thresholds ----------
LEARNING_MAX_REPETITIONS = 2
LEARNING_MAX_INTERVAL = 6
REVIEWING_MAX_INTERVAL = 21

# ---------- Readiness ----------
READINESS_BASE_SCORES = {
    "new": 10,
    "learning": 40,
    "reviewing": 70,
    "mastered": 100,
}
READINESS_OVERDUE_PENALTY = 5  # points per day overdue
READINESS_MIN_CARD_SCORE = 10

# ---------- Queue Builder ----------
DEFAULT_MAX_NEW = 10
DEFAULT_MAX_REVIEW = 50
REVIEWS_PER_NEW_CARD = 5

# ---------- Study Sessions ----------
QUICK_MAX_NEW = 3
QUICK_MAX_REVIEW = 10
DEFAULT_PROFILE_ID = "default"  # Progress key for sessions without a profile
RECENT_SESSIONS_LIMIT = 10
