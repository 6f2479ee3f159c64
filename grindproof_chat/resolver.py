"""
GrindProof Chat Service - Deletion Candidate Resolution

Matches a free-text deletion request against the user's open tasks.
A task matches when its title contains the search term or the search term
contains its title, which covers both abbreviated ("write") and
over-specified ("the write report task please") phrasing.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from grindproof_chat.constants import (
    CANDIDATE_LETTERS,
    DELETE_COMMAND_PREFIX,
    MAX_CANDIDATES,
    NOT_FOUND_HINT_LIMIT,
    OPEN_TASK_LIMIT,
)
from grindproof_chat.markers import Candidate
from grindproof_chat.tasks.models import Task


class ResolutionKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFIRM = "confirm"
    DISAMBIGUATE = "disambiguate"


@dataclass(frozen=True)
class CandidateResolution:
    kind: ResolutionKind
    search_term: str
    task: Optional[Task] = None
    candidates: List[Candidate] = field(default_factory=list)
    total_matches: int = 0
    hint_titles: List[str] = field(default_factory=list)


def extract_search_term(text: str) -> str:
    """Lower-cased request with the leading delete/remove/cancel phrase removed."""
    stripped = re.sub(DELETE_COMMAND_PREFIX, "", text or "", count=1, flags=re.IGNORECASE)
    return " ".join(stripped.split()).lower()


def _matches(title: str, search_term: str) -> bool:
    title_lower = " ".join(title.split()).lower()
    if not title_lower:
        return False
    return search_term in title_lower or title_lower in search_term


def resolve_candidates(text: str, open_tasks: Sequence[Task]) -> CandidateResolution:
    """
    Classify a deletion request as not found, a single match, or several.

    Only the OPEN_TASK_LIMIT most recent tasks are considered and at most
    MAX_CANDIDATES are offered (letters a-j); extra matches are dropped.
    """
    tasks = list(open_tasks)[:OPEN_TASK_LIMIT]
    search_term = extract_search_term(text)

    matches: List[Task] = []
    if search_term:
        matches = [t for t in tasks if _matches(t.title, search_term)]

    if not matches:
        return CandidateResolution(
            kind=ResolutionKind.NOT_FOUND,
            search_term=search_term,
            hint_titles=[t.title for t in tasks[:NOT_FOUND_HINT_LIMIT]],
        )

    if len(matches) == 1:
        return CandidateResolution(
            kind=ResolutionKind.CONFIRM,
            search_term=search_term,
            task=matches[0],
            total_matches=1,
        )

    offered = matches[:MAX_CANDIDATES]
    candidates = [
        Candidate(letter=letter, title=task.title, task_id=task.id)
        for letter, task in zip(CANDIDATE_LETTERS, offered)
    ]
    return CandidateResolution(
        kind=ResolutionKind.DISAMBIGUATE,
        search_term=search_term,
        candidates=candidates,
        total_matches=len(matches),
    )
