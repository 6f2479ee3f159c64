"""
GrindProof Chat Service - Task Draft Extraction

Two tiers: the language model turns a free-text request into a structured
draft; when that is unavailable or returns something unusable, a
deterministic fallback strips the command phrase and keeps the rest as the
title. Extraction therefore never fails outright.
"""

import json
import logging
import re
from datetime import date
from typing import Any, Dict, Optional

from pydantic import ValidationError

from grindproof_chat.constants import CREATE_COMMAND_PREFIX, DEFAULT_PRIORITY
from grindproof_chat.errors import LLMProviderError
from grindproof_chat.llm import TextCompletionClient
from grindproof_chat.prompts import TASK_EXTRACTION_USER_TEMPLATE, build_extraction_prompt
from grindproof_chat.schemas import TaskDraft

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def parse_json_object(content: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Return the first JSON object found in model output.

    Handles bare JSON, ```json fenced blocks and JSON surrounded by prose.
    Returns None when no object can be decoded.
    """
    if not content:
        return None
    text = content.strip()

    fenced = _FENCED_JSON.search(text)
    if fenced:
        text = fenced.group(1).strip()

    decoder = json.JSONDecoder()
    for match in re.finditer(r"\{", text):
        try:
            obj, _ = decoder.raw_decode(text[match.start():])
        except json.JSONDecodeError:
            continue
        if isinstance(obj, dict):
            return obj
    return None


def strip_command_prefix(text: str) -> str:
    """Remove a leading creation command ("add task:", "remind me to", ...)."""
    stripped = re.sub(CREATE_COMMAND_PREFIX, "", text or "", count=1, flags=re.IGNORECASE)
    return " ".join(stripped.split())


def fallback_draft(text: str) -> TaskDraft:
    """Deterministic draft: command phrase stripped, remainder as title."""
    return TaskDraft(title=strip_command_prefix(text), priority=DEFAULT_PRIORITY)


class TaskDraftExtractor:
    """Extracts a TaskDraft from free text, model first, regex second."""

    def __init__(self, llm_client: Optional[TextCompletionClient] = None):
        self._llm_client = llm_client

    async def extract(self, text: str, today: date) -> TaskDraft:
        if self._llm_client is None:
            logger.debug("No LLM client configured, using fallback extraction")
            return fallback_draft(text)

        try:
            content = await self._llm_client.complete(
                build_extraction_prompt(today),
                TASK_EXTRACTION_USER_TEMPLATE.format(text=text),
            )
        except LLMProviderError as e:
            logger.warning(f"Task extraction call failed ({e.kind.value}), using fallback")
            return fallback_draft(text)

        data = parse_json_object(content)
        if data is None:
            logger.warning(f"Task extraction returned no JSON object, using fallback: {content[:100]!r}")
            return fallback_draft(text)

        try:
            draft = TaskDraft.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Task extraction returned invalid fields, using fallback: {e}")
            return fallback_draft(text)

        if not draft.title:
            fallback = fallback_draft(text)
            draft = draft.model_copy(update={"title": fallback.title})
        return draft
