from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from grindproof_chat.constants import DEFAULT_PRIORITY, PRIORITY_MAP
from grindproof_chat.dates import normalize_time, parse_iso_date


class Message(BaseModel):
    """One transcript entry, owned by the client."""

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """
    Request to the chat endpoint.

    Carries the full ordered transcript; the last message is the user turn
    being answered.
    """

    model_config = ConfigDict(populate_by_name=True)

    messages: List[Message] = Field(
        min_length=1,
        description="Ordered conversation, oldest first; last message must be from the user",
    )
    conversation_id: Optional[str] = Field(
        default=None,
        alias="conversationId",
        description="Client-side conversation identifier (used for logging only)",
    )
    state_token: Optional[str] = Field(
        default=None,
        alias="stateToken",
        description="Signed dialogue state echoed back from the previous reply",
    )

    @model_validator(mode="after")
    def validate_last_message(self) -> "ChatRequest":
        """The turn being answered must be a non-empty user message."""
        last = self.messages[-1]
        if last.role != "user":
            raise ValueError("Last message must have role 'user'")
        if not last.content.strip():
            raise ValueError("Message cannot be empty or whitespace only")
        return self

    @property
    def latest_message(self) -> str:
        return self.messages[-1].content.strip()


class TaskDraft(BaseModel):
    """
    Structured task extracted from free text, not yet persisted.

    Accepts the model's camelCase keys as well as snake_case.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    description: Optional[str] = None
    due_date: Optional[date] = Field(default=None, alias="dueDate")
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")
    priority: Literal["high", "medium", "low"] = DEFAULT_PRIORITY
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def clean_title(cls, v: Any) -> str:
        if v is None:
            return ""
        if isinstance(v, (list, dict)):
            raise ValueError("title must be a string")
        return " ".join(str(v).split())

    @field_validator("description", mode="before")
    @classmethod
    def clean_description(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("due_date", mode="before")
    @classmethod
    def coerce_due_date(cls, v: Any) -> Optional[date]:
        return parse_iso_date(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def coerce_time(cls, v: Any) -> Optional[str]:
        return normalize_time(v)

    @field_validator("priority", mode="before")
    @classmethod
    def coerce_priority(cls, v: Any) -> str:
        if v is None:
            return DEFAULT_PRIORITY
        return PRIORITY_MAP.get(str(v).strip().lower(), DEFAULT_PRIORITY)

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v: Any) -> List[str]:
        if not v:
            return []
        if isinstance(v, str):
            v = v.split(",")
        elif not isinstance(v, (list, tuple)):
            raise ValueError("tags must be a list")
        tags: List[str] = []
        for tag in v:
            cleaned = str(tag).strip().lower()
            if cleaned and cleaned not in tags:
                tags.append(cleaned)
        return tags

    @model_validator(mode="after")
    def drop_orphan_times(self) -> "TaskDraft":
        # Times are only meaningful on a dated task
        if self.due_date is None:
            self.start_time = None
            self.end_time = None
        return self


class ChatResponse(BaseModel):
    """Successful reply: assistant text plus what, if anything, was executed."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(description="Assistant reply (markdown, may embed dialogue markers)")
    command_executed: Optional[Literal["create_task", "delete_task", "roast", "patterns"]] = Field(
        default=None,
        alias="commandExecuted",
        description="Command that ran during this turn",
    )
    data: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Structured result of the executed command",
    )
    state_token: Optional[str] = Field(
        default=None,
        alias="stateToken",
        description="Signed pending dialogue state to echo back on the next turn",
    )


class ErrorResponse(BaseModel):
    """Error object returned when the turn could not be answered."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    error_type: Literal["quota_exceeded", "service_unavailable", "network_error", "unknown"] = Field(
        alias="errorType"
    )
    retryable: bool
