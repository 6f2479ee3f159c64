"""
GrindProof Chat Service - Turn Orchestrator

Entry point for one chat turn. A flow left open by the previous reply is
continued first; otherwise the latest message is classified as a fresh
command; anything else goes to free-form chat.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from grindproof_chat import composer
from grindproof_chat.constants import CHAT_HISTORY_LIMIT, OPEN_TASK_LIMIT
from grindproof_chat.errors import TaskServiceError
from grindproof_chat.executor import CommandExecutor, ExecutionResult
from grindproof_chat.extractor import TaskDraftExtractor
from grindproof_chat.history import history_for_model
from grindproof_chat.intent import Intent, classify_intent
from grindproof_chat.llm import TextCompletionClient
from grindproof_chat.markers import strip_markers
from grindproof_chat.prompts import CHAT_SYSTEM_PROMPT, build_chat_prompt
from grindproof_chat.reports import ReportService
from grindproof_chat.resolver import ResolutionKind, resolve_candidates
from grindproof_chat.schemas import ChatRequest, ChatResponse
from grindproof_chat.state import (
    AwaitingCreateClarification,
    AwaitingDeleteConfirmation,
    AwaitingDeleteDisambiguation,
    CandidateSelected,
    ClarificationReceived,
    DeleteCancelled,
    DeleteConfirmed,
    DialogueState,
    reconstruct,
)
from grindproof_chat.state_token import decode_state, encode_state
from grindproof_chat.tasks.service import TaskServiceInterface
from grindproof_chat.validator import find_missing_fields, merge_clarification

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatInterpreterService:
    """
    Conversational command interpreter.

    Holds no per-conversation state: everything needed to continue a flow
    comes from the request (transcript and optional state token).
    """

    def __init__(
        self,
        task_service: TaskServiceInterface,
        llm_client: Optional[TextCompletionClient] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._llm_client = llm_client
        self._clock = clock or _utcnow
        self._task_service = task_service
        self._executor = CommandExecutor(task_service)
        self._extractor = TaskDraftExtractor(llm_client)
        self._reports = ReportService(task_service, llm_client)

    async def handle_turn(self, request: ChatRequest, user_id: str) -> ChatResponse:
        """
        Answer the latest user message.

        Raises:
            LLMProviderError: free chat or a report could not reach the model
        """
        now = self._clock()
        message = request.latest_message
        logger.debug(
            f"Turn for user {user_id} (conversation={request.conversation_id}, "
            f"messages={len(request.messages)}): {message[:100]}"
        )

        token_state = decode_state(request.state_token, user_id)
        resolution = reconstruct(request.messages, token_state)

        if isinstance(resolution, ClarificationReceived):
            logger.info(f"Continuing task creation for user {user_id}")
            return await self._finish_create(user_id, resolution, now)
        if isinstance(resolution, DeleteConfirmed):
            logger.info(f"Deletion confirmed for user {user_id}: {resolution.task_id}")
            return self._from_result(await self._executor.delete_task(user_id, resolution.task_id))
        if isinstance(resolution, DeleteCancelled):
            logger.info(f"Deletion cancelled for user {user_id}")
            return ChatResponse(text=composer.deletion_cancelled())
        if isinstance(resolution, CandidateSelected):
            candidate = resolution.candidate
            return self._pending(
                composer.delete_confirmation(candidate.task_id, candidate.title),
                AwaitingDeleteConfirmation(task_id=candidate.task_id),
                user_id,
                now,
            )

        intent = classify_intent(message)
        logger.info(f"Classified intent for user {user_id}: {intent.value}")

        if intent == Intent.CREATE_TASK:
            return await self._start_create(user_id, message, now)
        if intent == Intent.DELETE_TASK:
            return await self._start_delete(user_id, message, now)
        if intent == Intent.REPORT:
            return await self._weekly_roast(user_id, now)
        if intent == Intent.PATTERNS:
            return await self._analyze_patterns(user_id, now)
        return await self._free_chat(request)

    def _pending(self, text: str, state: DialogueState, user_id: str, now: datetime) -> ChatResponse:
        return ChatResponse(text=text, state_token=encode_state(state, user_id, now))

    @staticmethod
    def _from_result(result: ExecutionResult) -> ChatResponse:
        if not result.success:
            return ChatResponse(text=result.text)
        return ChatResponse(text=result.text, command_executed=result.command, data=result.data)

    # --- Creation ---------------------------------------------------------

    async def _start_create(self, user_id: str, message: str, now: datetime) -> ChatResponse:
        draft = await self._extractor.extract(message, now.date())
        pending = AwaitingCreateClarification(original_request=message)

        if not draft.title:
            return self._pending(composer.title_needed(), pending, user_id, now)

        questions = find_missing_fields(draft)
        if questions:
            logger.info(f"Asking {len(questions)} clarification question(s) for user {user_id}")
            return self._pending(composer.create_clarification(draft, questions), pending, user_id, now)

        return self._from_result(await self._executor.create_task(user_id, draft))

    async def _finish_create(
        self,
        user_id: str,
        resolution: ClarificationReceived,
        now: datetime,
    ) -> ChatResponse:
        today = now.date()
        draft = await self._extractor.extract(resolution.original_request, today)
        asked = [q.field for q in find_missing_fields(draft)]
        draft = merge_clarification(draft, resolution.reply, today, asked)

        if not draft.title:
            pending = AwaitingCreateClarification(original_request=resolution.original_request)
            return self._pending(composer.title_needed(), pending, user_id, now)

        return self._from_result(await self._executor.create_task(user_id, draft))

    # --- Deletion ---------------------------------------------------------

    async def _start_delete(self, user_id: str, message: str, now: datetime) -> ChatResponse:
        try:
            open_tasks = await self._task_service.list_open_tasks(user_id, OPEN_TASK_LIMIT)
        except TaskServiceError as e:
            logger.warning(f"Could not list open tasks for user {user_id}: {e}")
            return ChatResponse(text=composer.tasks_unavailable(str(e)))

        if not open_tasks:
            return ChatResponse(text=composer.no_open_tasks())

        result = resolve_candidates(message, open_tasks)
        logger.info(f"Deletion lookup for user {user_id}: {result.kind.value} ({result.total_matches} matches)")

        if result.kind == ResolutionKind.CONFIRM:
            return self._pending(
                composer.delete_confirmation(result.task.id, result.task.title),
                AwaitingDeleteConfirmation(task_id=result.task.id),
                user_id,
                now,
            )
        if result.kind == ResolutionKind.DISAMBIGUATE:
            return self._pending(
                composer.disambiguation(result.candidates, result.total_matches),
                AwaitingDeleteDisambiguation(candidates=tuple(result.candidates)),
                user_id,
                now,
            )
        return ChatResponse(text=composer.task_not_found(result.search_term, result.hint_titles))

    # --- Reports ----------------------------------------------------------

    async def _weekly_roast(self, user_id: str, now: datetime) -> ChatResponse:
        try:
            report = await self._reports.weekly_roast(user_id, now)
        except TaskServiceError as e:
            logger.warning(f"Could not load tasks for weekly roast, user {user_id}: {e}")
            return ChatResponse(text=composer.tasks_unavailable(str(e)))
        return ChatResponse(text=composer.weekly_roast(report), command_executed="roast", data=report)

    async def _analyze_patterns(self, user_id: str, now: datetime) -> ChatResponse:
        try:
            result = await self._reports.analyze_patterns(user_id, now)
        except TaskServiceError as e:
            logger.warning(f"Could not load tasks for pattern analysis, user {user_id}: {e}")
            return ChatResponse(text=composer.tasks_unavailable(str(e)))
        return ChatResponse(
            text=composer.patterns_summary(result["patterns"]),
            command_executed="patterns",
            data=result,
        )

    # --- Free chat --------------------------------------------------------

    async def _free_chat(self, request: ChatRequest) -> ChatResponse:
        if self._llm_client is None:
            return ChatResponse(text=composer.help_text())

        history = history_for_model(request.messages[:-1], CHAT_HISTORY_LIMIT)
        content = await self._llm_client.complete(
            CHAT_SYSTEM_PROMPT,
            build_chat_prompt(history, request.latest_message),
        )
        # A marker echoed by the model must not open a flow
        text = strip_markers(content)
        return ChatResponse(text=text or composer.help_text())
