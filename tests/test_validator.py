"""
GrindProof Chat Service - Missing-Field Validation Tests
"""

from datetime import date

from grindproof_chat.schemas import TaskDraft
from grindproof_chat.validator import (
    DUE_DATE_QUESTION,
    PRIORITY_QUESTION,
    find_missing_fields,
    merge_clarification,
)

TODAY = date(2025, 1, 15)  # Wednesday


class TestFindMissingFields:

    def test_time_word_in_title_needs_no_questions(self):
        assert find_missing_fields(TaskDraft(title="workout tomorrow")) == []

    def test_plain_title_asks_due_date(self):
        questions = find_missing_fields(TaskDraft(title="buy milk"))

        assert len(questions) == 1
        assert questions[0].field == "due_date"
        assert questions[0].prompt == DUE_DATE_QUESTION

    def test_due_date_present(self):
        assert find_missing_fields(TaskDraft(title="buy milk", due_date=TODAY)) == []

    def test_keyword_inside_a_word_counts(self):
        assert find_missing_fields(TaskDraft(title="read sundays newspaper archive")) == []
        assert find_missing_fields(TaskDraft(title="renew overdue library books")) == []

    def test_only_title_is_searched(self):
        draft = TaskDraft(title="call the bank")
        assert [q.field for q in find_missing_fields(draft)] == ["due_date"]

    def test_urgency_asks_priority_after_due_date(self):
        questions = find_missing_fields(TaskDraft(title="fix urgent bug"))

        assert [q.field for q in questions] == ["due_date", "priority"]
        assert questions[1].prompt == PRIORITY_QUESTION

    def test_explicit_priority_skips_question(self):
        draft = TaskDraft(title="fix urgent bug today", priority="high")
        assert find_missing_fields(draft) == []

    def test_urgency_with_date(self):
        draft = TaskDraft(title="asap call the bank", due_date=TODAY)
        assert [q.field for q in find_missing_fields(draft)] == ["priority"]


class TestMergeClarification:

    def test_fills_due_date_from_reply(self):
        merged = merge_clarification(TaskDraft(title="buy milk"), "tomorrow", TODAY)
        assert merged.title == "buy milk"
        assert merged.due_date == date(2025, 1, 16)

    def test_weekday_reply(self):
        merged = merge_clarification(TaskDraft(title="buy milk"), "on friday please", TODAY)
        assert merged.due_date == date(2025, 1, 17)

    def test_priority_reply(self):
        draft = TaskDraft(title="fix urgent bug")
        merged = merge_clarification(draft, "next week, high", TODAY, ["due_date", "priority"])
        assert merged.due_date == date(2025, 1, 22)
        assert merged.priority == "high"

    def test_urgency_word_means_high(self):
        merged = merge_clarification(TaskDraft(title="fix bug"), "it's critical", TODAY, ["priority"])
        assert merged.priority == "high"

    def test_priority_words_ignored_when_not_asked(self):
        merged = merge_clarification(TaskDraft(title="buy milk"), "tomorrow, not important", TODAY, ["due_date"])
        assert merged.due_date == date(2025, 1, 16)
        assert merged.priority == "medium"

    def test_reply_becomes_title_when_missing(self):
        merged = merge_clarification(TaskDraft(title=""), "buy milk", TODAY)
        assert merged.title == "buy milk"

    def test_existing_due_date_kept(self):
        draft = TaskDraft(title="buy milk", due_date=TODAY)
        merged = merge_clarification(draft, "tomorrow", TODAY)
        assert merged.due_date == TODAY

    def test_unhelpful_reply_leaves_draft(self):
        draft = TaskDraft(title="buy milk")
        assert merge_clarification(draft, "whenever", TODAY) == draft
