"""
Directory Vocabularies
Fixed value sets shared by validation, persistence and filtering
"""

# Weekday lookup seeded into meeting_days (id -> name)
MEETING_DAYS = (
    (1, "Monday"),
    (2, "Tuesday"),
    (3, "Wednesday"),
    (4, "Thursday"),
    (5, "Friday"),
)
DAY_IDS = {name: day_id for day_id, name in MEETING_DAYS}

MEETING_FREQUENCIES = ("weekly", "biweekly", "monthly", "event")
MEETING_TIME_TYPES = ("lunch", "after_school")

CLUB_STATUSES = ("pending", "approved", "rejected")
DEFAULT_STATUS = "approved"

CATEGORY_LABELS = {
    "competition": "Competition-based",
    "activity": "Activity-based",
    "community": "Community Service–based",
    "research": "Research / Academic",
    "advocacy": "Awareness / Advocacy",
    "outreach": "Outreach / Teaching",
}
ALLOWED_CATEGORIES = frozenset(CATEGORY_LABELS)
CATEGORY_BY_LABEL = {label: key for key, label in CATEGORY_LABELS.items()}

# Current field names and the legacy labels older clubs were saved with
FIELD_SYNONYMS = {
    "STEM": ("STEM",),
    "Humanities": ("Humanities",),
    "Arts / Culture": ("Arts / Culture", "Arts"),
    "Social Impact / Service": ("Social Impact / Service", "Community Service"),
    "Sports & Wellness": ("Sports & Wellness", "Sports"),
    "Faith / Identity / Other": ("Faith / Identity / Other", "Faith / Identity", "Other"),
}

DEFAULT_SUBJECT = "Other"
MAX_DESCRIPTION_WORDS = 200

# Column widths for submitted text (tag lists are checked per label)
MAX_LENGTHS = {
    "club_name": 200,
    "president_contact": 255,
    "meeting_time_range": 100,
    "meeting_room": 50,
    "website_url": 512,
    "fields": 100,
    "subfields": 100,
}

# Rate limiter buckets
ADMIN_LOGIN_BUCKET = "admin_login"
PRESIDENT_SUBMIT_BUCKET = "pres_submit"
