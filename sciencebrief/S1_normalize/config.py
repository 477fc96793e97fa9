"""Step 1 config - controlled vocabulary and extraction constants.

Keep the vocabulary small and high-signal: it drives both keyword tags and
the pitch score. Declaration order matters, since extraction keeps the first
six matches in this order.
"""

# 1) Controlled vocabulary (substring match on lower-cased title + description)
KEYWORD_VOCABULARY: list[str] = [
    # Core cognitive neuroscience
    "neural",
    "brain",
    "cognition",
    "cognitive",
    "memory",
    "perception",
    "attention",
    "learning",
    "behavior",
    "behaviour",
    "emotion",
    "social",
    # Music and audition
    "music",
    "auditory",
    "visual",
    "motor",
    "language",
    "speech",
    # Lifespan
    "development",
    "aging",
    "plasticity",
    # Clinical
    "therapy",
    "treatment",
    "depression",
    "anxiety",
    "disorder",
    "clinical",
    "fmri",
    "eeg",
    # Timing and space
    "rhythm",
    "pitch",
    "temporal",
    "spatial",
    "sensory",
    # Anatomy
    "cortex",
    "hippocampus",
    "prefrontal",
    # Higher-order
    "consciousness",
    "decision",
    "reward",
    # Populations and culture
    "infant",
    "child",
    "adult",
    "culture",
    "cross-cultural",
]

MAX_KEYWORDS = 6

# 2) Entities decoded by html_to_text; anything else is left untouched
HTML_ENTITIES: dict[str, str] = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}

# 3) Fallbacks
UNKNOWN_AUTHORS = "Unknown authors"
UNTITLED = "Untitled"
