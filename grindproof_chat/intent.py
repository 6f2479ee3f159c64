# grindproof_chat/intent.py
import re
from enum import Enum

from grindproof_chat.constants import (
    CREATE_TASK_PATTERNS,
    DELETE_TASK_PATTERNS,
    PATTERN_PHRASES,
    REPORT_PHRASES,
)


class Intent(str, Enum):
    REPORT = "report"
    PATTERNS = "patterns"
    CREATE_TASK = "create_task"
    DELETE_TASK = "delete_task"
    NONE = "none"


def classify_intent(message: str) -> Intent:
    """
    Keyword classification of the latest user message.

    Order matters: report and pattern commands win over task commands, and
    creation is checked before deletion.
    """
    text = (message or "").strip().lower()
    if not text:
        return Intent.NONE

    if any(phrase in text for phrase in REPORT_PHRASES):
        return Intent.REPORT
    if any(phrase in text for phrase in PATTERN_PHRASES):
        return Intent.PATTERNS
    if any(re.search(pattern, text) for pattern in CREATE_TASK_PATTERNS):
        return Intent.CREATE_TASK
    if any(re.search(pattern, text) for pattern in DELETE_TASK_PATTERNS):
        return Intent.DELETE_TASK
    return Intent.NONE
