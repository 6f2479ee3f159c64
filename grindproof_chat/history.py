# grindproof_chat/history.py
from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from grindproof_chat.markers import strip_markers
from grindproof_chat.schemas import Message


def last_exchange(messages: Sequence[Message]) -> Optional[tuple[Message, Message]]:
    """
    Returns (previous assistant message, new user message) when the
    transcript ends with an assistant turn answered by the user.
    """
    if len(messages) < 2:
        return None
    previous, latest = messages[-2], messages[-1]
    if previous.role != "assistant" or latest.role != "user":
        return None
    return previous, latest


def find_previous_user_message(
    before_index: int,
    messages: Sequence[Message],
    predicate: Callable[[str], bool],
) -> Optional[str]:
    """
    Walk backwards from before_index-1 and return the first user message
    content accepted by predicate.
    """
    for i in range(before_index - 1, -1, -1):
        msg = messages[i]
        if msg.role != "user":
            continue
        content = (msg.content or "").strip()
        if content and predicate(content):
            return content
    return None


def history_for_model(messages: Sequence[Message], limit: int) -> List[dict]:
    """Tail of the transcript with markers removed, as chat-completion messages."""
    recent = list(messages)[-limit:]
    return [
        {"role": msg.role, "content": strip_markers(msg.content)}
        for msg in recent
    ]
