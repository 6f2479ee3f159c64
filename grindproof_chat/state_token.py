"""
GrindProof Chat Service - Signed State Token

Serializes a pending DialogueState into a short-lived signed JWT returned with
the reply. A client that echoes it back lets the next turn resume without
re-reading markers from the transcript. Tokens are opaque to clients.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from grindproof_chat.config import settings
from grindproof_chat.markers import Candidate
from grindproof_chat.state import (
    AwaitingCreateClarification,
    AwaitingDeleteConfirmation,
    AwaitingDeleteDisambiguation,
    DialogueState,
)

logger = logging.getLogger(__name__)


def state_to_claims(state: DialogueState) -> Optional[dict]:
    """Claims for a pending state; None for Idle (nothing to resume)."""
    if isinstance(state, AwaitingCreateClarification):
        return {"state": "create_clarification", "original_request": state.original_request}
    if isinstance(state, AwaitingDeleteConfirmation):
        return {"state": "delete_confirmation", "task_id": state.task_id}
    if isinstance(state, AwaitingDeleteDisambiguation):
        return {
            "state": "delete_disambiguation",
            "candidates": [
                {"letter": c.letter, "title": c.title, "task_id": c.task_id}
                for c in state.candidates
            ],
        }
    return None


def state_from_claims(claims: dict) -> Optional[DialogueState]:
    kind = claims.get("state")
    if kind == "create_clarification" and claims.get("original_request"):
        return AwaitingCreateClarification(original_request=claims["original_request"])
    if kind == "delete_confirmation" and claims.get("task_id"):
        return AwaitingDeleteConfirmation(task_id=claims["task_id"])
    if kind == "delete_disambiguation" and claims.get("candidates"):
        candidates = tuple(
            Candidate(letter=c["letter"], title=c["title"], task_id=c["task_id"])
            for c in claims["candidates"]
        )
        return AwaitingDeleteDisambiguation(candidates=candidates)
    return None


def encode_state(
    state: DialogueState,
    subject: str,
    now: Optional[datetime] = None,
) -> Optional[str]:
    """
    Sign a pending state for the given user.

    Returns None for Idle so terminal replies carry no token.
    """
    claims = state_to_claims(state)
    if claims is None:
        return None
    issued = now or datetime.now(timezone.utc)
    claims.update({
        "sub": subject,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(minutes=settings.STATE_TOKEN_EXPIRE_MINUTES)).timestamp()),
    })
    return jwt.encode(claims, settings.STATE_TOKEN_SECRET, algorithm=settings.STATE_TOKEN_ALGORITHM)


def decode_state(token: Optional[str], subject: str) -> Optional[DialogueState]:
    """
    Verify and decode a state token.

    Invalid, expired, malformed or foreign tokens yield None; the caller then
    falls back to the transcript.
    """
    if not token:
        return None
    try:
        claims = jwt.decode(
            token,
            settings.STATE_TOKEN_SECRET,
            algorithms=[settings.STATE_TOKEN_ALGORITHM],
        )
    except JWTError as e:
        logger.warning(f"Ignoring invalid state token: {e}")
        return None

    if claims.get("sub") != subject:
        logger.warning("Ignoring state token issued for another user")
        return None

    try:
        state = state_from_claims(claims)
    except (KeyError, TypeError) as e:
        logger.warning(f"Ignoring malformed state token claims: {e}")
        return None
    if state is None:
        logger.warning(f"Ignoring state token with unknown state: {claims.get('state')}")
    return state
