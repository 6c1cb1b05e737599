from datetime import timedelta

INTERVAL_DAYS = (1, 2, 4, 7, 14, 21)  # indexed by the stage before a success
MAX_STAGE = len(INTERVAL_DAYS) - 1
FALLBACK_INTERVAL_DAYS = 1
FAILURE_DELAY = timedelta(hours=12)
MAX_SESSION_ATTEMPTS = 3  # wrong answers before a term is failed for the day
DISTRACTOR_COUNT = 2
DEFAULT_GROUP_ID = "default"
