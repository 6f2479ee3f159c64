"""
GrindProof Chat Service - Task Draft Extraction Tests

Model output is untrusted: anything unusable falls back to the
deterministic draft, which never fails on non-empty input.
"""

from datetime import date

from grindproof_chat.errors import ErrorType, LLMProviderError
from grindproof_chat.extractor import (
    TaskDraftExtractor,
    fallback_draft,
    parse_json_object,
    strip_command_prefix,
)
from tests.conftest import FakeLLMClient

TODAY = date(2025, 1, 15)


class TestStripCommandPrefix:

    def test_strips_add_task_colon(self):
        assert strip_command_prefix("add task: buy milk") == "buy milk"

    def test_strips_remind_me_to(self):
        assert strip_command_prefix("Remind me to call mom") == "call mom"

    def test_strips_create_new_task(self):
        assert strip_command_prefix("create a new task - pay rent") == "pay rent"

    def test_keeps_text_without_prefix(self):
        assert strip_command_prefix("buy milk") == "buy milk"

    def test_only_command_words_leaves_nothing(self):
        assert strip_command_prefix("add task:") == ""


class TestFallbackDraft:

    def test_title_from_remainder(self):
        draft = fallback_draft("add task: workout tomorrow at 6am")
        assert draft.title == "workout tomorrow at 6am"
        assert draft.priority == "medium"
        assert draft.due_date is None

    def test_command_only_gives_empty_title(self):
        assert fallback_draft("add task:").title == ""


class TestParseJsonObject:

    def test_bare_json(self):
        assert parse_json_object('{"title": "x"}') == {"title": "x"}

    def test_fenced_json(self):
        assert parse_json_object('```json\n{"title": "x"}\n```') == {"title": "x"}

    def test_json_inside_prose(self):
        content = 'Sure! Here it is: {"title": "x", "priority": "high"} Hope that helps.'
        assert parse_json_object(content) == {"title": "x", "priority": "high"}

    def test_not_json(self):
        assert parse_json_object("no json here") is None
        assert parse_json_object("") is None
        assert parse_json_object(None) is None

    def test_array_is_not_an_object(self):
        assert parse_json_object("[1, 2, 3]") is None


class TestTaskDraftExtractor:

    async def test_without_model_uses_fallback(self):
        draft = await TaskDraftExtractor().extract("add task: buy milk", TODAY)
        assert draft.title == "buy milk"

    async def test_model_output_parsed(self):
        llm = FakeLLMClient(
            '{"title": "workout", "dueDate": "2025-01-16", "startTime": "6am", '
            '"priority": "urgent", "tags": ["Health", "health"]}'
        )
        draft = await TaskDraftExtractor(llm).extract("add task: workout tomorrow at 6am", TODAY)

        assert draft.title == "workout"
        assert draft.due_date == date(2025, 1, 16)
        assert draft.start_time == "06:00"
        assert draft.priority == "high"
        assert draft.tags == ["health"]
        assert "Today is 2025-01-15" in llm.calls[0][0]
        assert "workout tomorrow at 6am" in llm.calls[0][1]

    async def test_unparseable_output_falls_back(self):
        llm = FakeLLMClient("I'm not sure what you mean")
        draft = await TaskDraftExtractor(llm).extract("add task: buy milk", TODAY)
        assert draft.title == "buy milk"

    async def test_invalid_fields_fall_back(self):
        llm = FakeLLMClient('{"title": ["not", "a", "string"], "tags": 5}')
        draft = await TaskDraftExtractor(llm).extract("add task: buy milk", TODAY)
        assert draft.title == "buy milk"

    async def test_provider_error_falls_back(self):
        llm = FakeLLMClient(LLMProviderError(ErrorType.QUOTA_EXCEEDED, "quota"))
        draft = await TaskDraftExtractor(llm).extract("add task: buy milk", TODAY)
        assert draft.title == "buy milk"

    async def test_empty_model_title_filled_from_fallback(self):
        llm = FakeLLMClient('{"title": "", "priority": "low"}')
        draft = await TaskDraftExtractor(llm).extract("remind me to stretch", TODAY)
        assert draft.title == "stretch"
        assert draft.priority == "low"

    async def test_invalid_date_and_time_dropped(self):
        llm = FakeLLMClient('{"title": "x", "dueDate": "someday", "startTime": "25:99"}')
        draft = await TaskDraftExtractor(llm).extract("add task: x", TODAY)
        assert draft.due_date is None
        assert draft.start_time is None
