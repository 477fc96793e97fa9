"""Step 4 config - pitch scoring weights and outlet suggestions.

HIGH_INTEREST and MEDIUM_INTEREST must not overlap: each keyword contributes
to at most one bonus.
"""

BASE_SCORE = 50
MIN_SCORE = 20
MAX_SCORE = 100

# 1) Keyword interest
HIGH_INTEREST_KEYWORDS: tuple[str, ...] = (
    "therapy", "treatment", "depression", "anxiety", "consciousness", "decision",
    "social", "development", "infant", "culture", "music", "plasticity",
)
HIGH_INTEREST_BONUS = 8

MEDIUM_INTEREST_KEYWORDS: tuple[str, ...] = (
    "memory", "learning", "attention", "emotion", "perception", "cognition",
    "brain", "neural",
)
MEDIUM_INTEREST_BONUS = 4

# 2) Recency: (max age in days, bonus), checked in order
RECENCY_BONUSES: tuple[tuple[int, int], ...] = (
    (7, 15),
    (14, 10),
    (30, 5),
)

# 3) Title shape
LONG_TITLE_CHARS = 80
LONG_TITLE_BONUS = 5
SUBTITLE_BONUS = 3

# 4) Outlet suggestions. General-interest rules come first so they survive
#    truncation to MAX_SUGGESTIONS.
SCORE_OUTLETS: tuple[tuple[int, tuple[str, ...]], ...] = (
    (85, ("The Atlantic", "Wired")),
    (75, ("Scientific American", "Aeon")),
)

TOPIC_OUTLETS: tuple[tuple[frozenset[str], tuple[str, ...]], ...] = (
    # clinical
    (frozenset({"therapy", "treatment", "depression", "anxiety", "clinical"}),
     ("STAT News", "Psychology Today")),
    # music
    (frozenset({"music", "rhythm", "auditory", "pitch"}),
     ("The Conversation", "Psyche")),
    # developmental
    (frozenset({"infant", "child", "development"}),
     ("Scientific American Mind", "Quartz")),
    # cultural
    (frozenset({"culture", "social"}),
     ("Nautilus", "Aeon")),
    # neuro
    (frozenset({"brain", "neural", "cortex", "consciousness"}),
     ("Quanta Magazine", "Discover")),
)

MAX_SUGGESTIONS = 5

# 5) Tiers (display labels)
HIGH_TIER = 85
MEDIUM_TIER = 70
TIER_LABELS: dict[str, str] = {
    "high": "High potential",
    "medium": "Worth considering",
    "low": "Niche appeal",
}
