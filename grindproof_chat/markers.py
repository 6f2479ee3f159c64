"""
GrindProof Chat Service - Dialogue Markers

Markers are the textual tags an assistant reply carries so that the next turn
can resume a pending flow from the transcript alone. This module is the only
place markers are written or read: the composer renders through
`render_*`, the state reconstructor parses through `parse_*`.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

# Task ids are UUIDs (36 characters including hyphens)
TASK_ID_PATTERN = r"[0-9A-Za-z]{8}-[0-9A-Za-z]{4}-[0-9A-Za-z]{4}-[0-9A-Za-z]{4}-[0-9A-Za-z]{12}"

_TASK_ID_LINE = re.compile(rf"Task ID:\s*({TASK_ID_PATTERN})")
_CANDIDATE_LINE = re.compile(
    rf"^\s*([a-z])\.\s+(.+?)\s+\(ID:\s*({TASK_ID_PATTERN})\)\s*$",
    re.MULTILINE,
)
_MARKER_COMMENT = re.compile(r"<!--\s*VALIDATION_[A-Z_]+\s*-->")


class Marker(str, Enum):
    CREATE_TASK = "VALIDATION_CREATE_TASK"
    DELETE_TASK = "VALIDATION_DELETE_TASK"
    SELECT_TASK = "VALIDATION_SELECT_TASK"


@dataclass(frozen=True)
class Candidate:
    """A lettered deletion candidate offered for disambiguation."""

    letter: str
    title: str
    task_id: str


def render_marker(marker: Marker) -> str:
    """Marker line, hidden from markdown rendering but kept verbatim in the text."""
    return f"<!-- {marker.value} -->"


def render_task_id(task_id: str) -> str:
    return f"Task ID: {task_id}"


def render_candidate(candidate: Candidate) -> str:
    # Titles are flattened to one line so the candidate pattern stays line-based
    title = " ".join(candidate.title.split())
    return f"{candidate.letter}. {title} (ID: {candidate.task_id})"


def find_marker(text: Optional[str]) -> Optional[Marker]:
    """Return the marker embedded in text, if any."""
    if not text:
        return None
    for marker in Marker:
        if marker.value in text:
            return marker
    return None


def parse_task_id(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    m = _TASK_ID_LINE.search(text)
    return m.group(1) if m else None


def parse_candidates(text: Optional[str]) -> List[Candidate]:
    if not text:
        return []
    return [
        Candidate(letter=letter, title=title.strip(), task_id=task_id)
        for letter, title, task_id in _CANDIDATE_LINE.findall(text)
    ]


def strip_markers(text: str) -> str:
    """Remove marker comments (used before replaying history to the model)."""
    return _MARKER_COMMENT.sub("", text).strip()
