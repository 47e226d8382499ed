"""Global constants for the groupfit application."""

# Firestore collections
GROUPS_COLLECTION = "groups"
PARTICIPANTS_COLLECTION = "participants"
RECORDS_COLLECTION = "records"
FIRESTORE_BATCH_LIMIT = 400

# Badge thresholds
PARTICIPANT_BADGE_THRESHOLD = 10
RECORD_BADGE_THRESHOLD = 100
LIKE_BADGE_THRESHOLD = 100

# Ranking-related constants
RANKING_LIMIT = 10
UNKNOWN_NICKNAME = "Unknown"
RANKING_DURATIONS = ("weekly", "monthly")
DEFAULT_RANKING_DURATION = "weekly"
# Weeks start on Monday (datetime.weekday() == 0). Windows are inclusive on
# both ends: [period start, now].
WEEK_START_WEEKDAY = 0

# Record-related constants
EXERCISE_TYPES = ("run", "bike", "swim")
MAX_RECORD_PHOTOS = 3

# Listing-related constants
GROUP_ORDER_FIELDS = ("createdAt", "likeCount", "participantCount")
RECORD_ORDER_FIELDS = ("createdAt", "time")
SORT_DIRECTIONS = ("asc", "desc")
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
