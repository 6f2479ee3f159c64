# grindproof_chat/validator.py
import re
from dataclasses import dataclass
from datetime import date
from typing import Collection, List

from grindproof_chat.constants import (
    DEFAULT_PRIORITY,
    PRIORITY_MAP,
    TIME_SENSITIVE_KEYWORDS,
    URGENCY_KEYWORDS,
)
from grindproof_chat.dates import resolve_relative_date
from grindproof_chat.schemas import TaskDraft

DUE_DATE_QUESTION = "When is this due?"
PRIORITY_QUESTION = "What priority should this be?"


@dataclass(frozen=True)
class ClarificationQuestion:
    field: str
    prompt: str


def _contains_keyword(text: str, keywords) -> bool:
    return any(k in text for k in keywords)


def find_missing_fields(draft: TaskDraft) -> List[ClarificationQuestion]:
    """
    Questions that must be answered before the task is safe to create.

    Only the due date and the priority are ever questioned, in that order.
    Keywords are looked up in the title.
    """
    text = (draft.title or "").lower()
    questions: List[ClarificationQuestion] = []

    if draft.due_date is None and not _contains_keyword(text, TIME_SENSITIVE_KEYWORDS):
        questions.append(ClarificationQuestion("due_date", DUE_DATE_QUESTION))

    if draft.priority == DEFAULT_PRIORITY and _contains_keyword(text, URGENCY_KEYWORDS):
        questions.append(ClarificationQuestion("priority", PRIORITY_QUESTION))

    return questions


def merge_clarification(
    draft: TaskDraft,
    reply: str,
    today: date,
    asked: Collection[str] = (),
) -> TaskDraft:
    """
    Fold a free-text clarification answer into a draft.

    Fills a missing due date from date words and uses the answer as title when
    the draft has none. Priority words only count when the priority question
    was among the ``asked`` fields.
    """
    answer = " ".join((reply or "").split())
    lowered = answer.lower()
    updates = {}

    if not draft.title:
        updates["title"] = answer

    if draft.due_date is None:
        due = resolve_relative_date(lowered, today)
        if due is not None:
            updates["due_date"] = due

    if "priority" in asked:
        for word in re.findall(r"[a-z]+", lowered):
            if word in PRIORITY_MAP:
                updates["priority"] = PRIORITY_MAP[word]
                break
        else:
            if _contains_keyword(lowered, URGENCY_KEYWORDS):
                updates["priority"] = "high"

    if not updates:
        return draft
    # Re-validate so field coercion applies to merged values
    return TaskDraft.model_validate({**draft.model_dump(), **updates})
