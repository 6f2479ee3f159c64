# grindproof_chat/confirm.py
from enum import Enum
from typing import FrozenSet

from grindproof_chat.constants import CANCEL_TOKENS, CONFIRM_TOKENS

_TRAILING = ".!?, "


class ConfirmationAnswer(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    UNRESOLVED = "unresolved"


def normalize_reply(text: str) -> str:
    """Lower-cased reply with trailing punctuation dropped ("Yes!" -> "yes")."""
    return (text or "").strip().lower().rstrip(_TRAILING)


def parse_confirmation(
    text: str,
    confirm_tokens: FrozenSet[str] = frozenset(CONFIRM_TOKENS),
    cancel_tokens: FrozenSet[str] = frozenset(CANCEL_TOKENS),
) -> ConfirmationAnswer:
    # The whole reply must be the answer; "add task: email y combinator" is not a yes
    answer = normalize_reply(text)
    if answer in confirm_tokens:
        return ConfirmationAnswer.CONFIRMED
    if answer in cancel_tokens:
        return ConfirmationAnswer.CANCELLED
    return ConfirmationAnswer.UNRESOLVED
