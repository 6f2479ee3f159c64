"""
GrindProof Chat Service - Dialogue State

Pending dialogue state is never stored server-side. Each turn derives it from
the previous assistant reply (its marker) or from the signed state token the
client echoed back, then interprets the user's new message against it.
Everything here is pure: the same input always yields the same result.
"""

import re
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from grindproof_chat.confirm import ConfirmationAnswer, parse_confirmation
from grindproof_chat.history import find_previous_user_message, last_exchange
from grindproof_chat.intent import Intent, classify_intent
from grindproof_chat.markers import (
    Candidate,
    Marker,
    find_marker,
    parse_candidates,
    parse_task_id,
)
from grindproof_chat.schemas import Message


# --- Pending state --------------------------------------------------------

@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class AwaitingCreateClarification:
    original_request: str


@dataclass(frozen=True)
class AwaitingDeleteConfirmation:
    task_id: str


@dataclass(frozen=True)
class AwaitingDeleteDisambiguation:
    candidates: Tuple[Candidate, ...]


DialogueState = Union[
    Idle,
    AwaitingCreateClarification,
    AwaitingDeleteConfirmation,
    AwaitingDeleteDisambiguation,
]


# --- Interpretation of the reply -----------------------------------------

@dataclass(frozen=True)
class NoPendingFlow:
    pass


@dataclass(frozen=True)
class ClarificationReceived:
    original_request: str
    reply: str


@dataclass(frozen=True)
class DeleteConfirmed:
    task_id: str


@dataclass(frozen=True)
class DeleteCancelled:
    pass


@dataclass(frozen=True)
class CandidateSelected:
    candidate: Candidate


Resolution = Union[
    NoPendingFlow,
    ClarificationReceived,
    DeleteConfirmed,
    DeleteCancelled,
    CandidateSelected,
]

_SINGLE_LETTER = re.compile(r"^[a-z]$")


def _is_create_request(text: str) -> bool:
    return classify_intent(text) == Intent.CREATE_TASK


def pending_state(messages: Sequence[Message]) -> DialogueState:
    """Derive the pending state from the marker in the previous assistant reply."""
    exchange = last_exchange(messages)
    if exchange is None:
        return Idle()
    previous, _ = exchange

    marker = find_marker(previous.content)
    if marker == Marker.CREATE_TASK:
        original = find_previous_user_message(len(messages) - 2, messages, _is_create_request)
        if original is None:
            return Idle()
        return AwaitingCreateClarification(original_request=original)

    if marker == Marker.DELETE_TASK:
        task_id = parse_task_id(previous.content)
        if task_id is None:
            return Idle()
        return AwaitingDeleteConfirmation(task_id=task_id)

    if marker == Marker.SELECT_TASK:
        candidates = parse_candidates(previous.content)
        if not candidates:
            return Idle()
        return AwaitingDeleteDisambiguation(candidates=tuple(candidates))

    return Idle()


def resume(state: DialogueState, reply: str) -> Resolution:
    """Interpret the user's reply against a pending state."""
    text = (reply or "").strip()

    if isinstance(state, AwaitingCreateClarification):
        return ClarificationReceived(original_request=state.original_request, reply=text)

    if isinstance(state, AwaitingDeleteConfirmation):
        answer = parse_confirmation(text)
        if answer == ConfirmationAnswer.CONFIRMED:
            return DeleteConfirmed(task_id=state.task_id)
        if answer == ConfirmationAnswer.CANCELLED:
            return DeleteCancelled()
        return NoPendingFlow()

    if isinstance(state, AwaitingDeleteDisambiguation):
        if _SINGLE_LETTER.match(text):
            for candidate in state.candidates:
                if candidate.letter == text:
                    return CandidateSelected(candidate=candidate)
        return NoPendingFlow()

    return NoPendingFlow()


def reconstruct(
    messages: Sequence[Message],
    token_state: Optional[DialogueState] = None,
) -> Resolution:
    """
    Resolve the current turn against whatever flow the previous turn left open.

    A verified token state takes precedence over the transcript markers.
    """
    if len(messages) < 2 or messages[-1].role != "user":
        return NoPendingFlow()
    state = token_state if token_state is not None else pending_state(messages)
    return resume(state, messages[-1].content)
