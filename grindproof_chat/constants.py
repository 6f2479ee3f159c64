# grindproof_chat/constants.py

# Keep these canonical values consistent with the task service enums
PRIORITY_MAP = {
    "low": "low",
    "medium": "medium",
    "normal": "medium",
    "high": "high",
    "urgent": "high",
    "important": "high",
}

DEFAULT_PRIORITY = "medium"

REPORT_PHRASES = (
    "roast me",
    "generate roast",
    "weekly report",
    "weekly roast",
    "how did i do this week",
)

PATTERN_PHRASES = (
    "analyze my patterns",
    "analyse my patterns",
    "my patterns",
    "behavioral patterns",
    "behavioural patterns",
    "what patterns",
)

CREATE_TASK_PATTERNS = (
    r"^(?:add|create|new)\s+(?:a\s+)?(?:new\s+)?(?:task|todo)\b",
    r"^(?:task|todo)\s*:",
    r"\bremind me to\b",
    r"\badd (?:this )?to my (?:tasks|list|todo list)\b",
)

DELETE_TASK_PATTERNS = (
    r"^(?:delete|remove|cancel)\b",
    r"\b(?:delete|remove|cancel) (?:the |my )?task\b",
    r"\bremove:",
)

# Leading phrases stripped by the fallback title extraction (longest first)
CREATE_COMMAND_PREFIX = (
    r"^\s*(?:"
    r"remind me to"
    r"|(?:add|create|new)\s+(?:a\s+)?(?:new\s+)?(?:task|todo)"
    r"|(?:add|create)"
    r"|task|todo"
    r")\b\s*[:\-]?\s*(?:to\s+)?"
)

DELETE_COMMAND_PREFIX = (
    r"^\s*(?:delete|remove|cancel)\s*(?:the\s+|my\s+)?(?:task\b)?\s*:?\s*"
)

TIME_SENSITIVE_KEYWORDS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
    "today",
    "tonight",
    "tomorrow",
    "deadline",
    "due",
    "next week",
)

URGENCY_KEYWORDS = ("urgent", "asap", "critical", "emergency")

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

CONFIRM_TOKENS = {"yes", "y", "confirm"}
CANCEL_TOKENS = {"no", "n", "cancel"}

# Deletion lookups only consider the most recent open tasks
OPEN_TASK_LIMIT = 20
MAX_CANDIDATES = 10
NOT_FOUND_HINT_LIMIT = 10
CANDIDATE_LETTERS = "abcdefghij"

# Free-form chat only replays the tail of the transcript
CHAT_HISTORY_LIMIT = 10
