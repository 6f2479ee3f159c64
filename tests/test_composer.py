"""
GrindProof Chat Service - Response Composer and Marker Tests
"""

from datetime import date

from grindproof_chat import composer
from grindproof_chat.markers import (
    Candidate,
    Marker,
    find_marker,
    parse_candidates,
    parse_task_id,
    render_marker,
    strip_markers,
)
from grindproof_chat.schemas import TaskDraft
from grindproof_chat.tasks.enums import TaskPriority
from grindproof_chat.tasks.models import Task
from grindproof_chat.validator import ClarificationQuestion

TASK_ID = "3f2b8c1e-9a4d-4e6f-8b7a-1c2d3e4f5a6b"


class TestMarkers:

    def test_marker_hidden_in_html_comment(self):
        assert render_marker(Marker.DELETE_TASK) == "<!-- VALIDATION_DELETE_TASK -->"

    def test_find_marker(self):
        assert find_marker("text\n<!-- VALIDATION_SELECT_TASK -->") == Marker.SELECT_TASK
        assert find_marker("plain text") is None
        assert find_marker(None) is None

    def test_strip_markers(self):
        text = composer.delete_confirmation(TASK_ID, "Write report")
        stripped = strip_markers(text)

        assert "VALIDATION" not in stripped
        assert "Write report" in stripped

    def test_task_id_requires_full_uuid(self):
        assert parse_task_id("Task ID: 1234") is None
        assert parse_task_id(f"Task ID: {TASK_ID}") == TASK_ID

    def test_candidate_titles_flattened_to_one_line(self):
        text = composer.disambiguation(
            [Candidate("a", "Write\nreport", TASK_ID)],
            total_matches=1,
        )
        assert parse_candidates(text) == [Candidate("a", "Write report", TASK_ID)]


class TestComposer:

    def test_task_created_has_no_marker(self):
        task = Task.create(
            owner_id="user-1",
            title="workout",
            priority=TaskPriority.HIGH,
            due_date=date(2025, 1, 16),
            start_time="06:00",
        )
        text = composer.task_created(task)

        assert find_marker(text) is None
        assert "workout" in text
        assert "on 2025-01-16 at 06:00" in text
        assert "high priority" in text

    def test_clarification_lists_questions_with_marker(self):
        questions = [
            ClarificationQuestion("due_date", "When is this due?"),
            ClarificationQuestion("priority", "What priority should this be?"),
        ]
        text = composer.create_clarification(TaskDraft(title="fix urgent bug"), questions)

        assert "- When is this due?" in text
        assert "- What priority should this be?" in text
        assert find_marker(text) == Marker.CREATE_TASK

    def test_title_needed_has_creation_marker(self):
        assert find_marker(composer.title_needed()) == Marker.CREATE_TASK

    def test_delete_confirmation_embeds_task_id(self):
        text = composer.delete_confirmation(TASK_ID, "Write report")

        assert find_marker(text) == Marker.DELETE_TASK
        assert parse_task_id(text) == TASK_ID

    def test_disambiguation_reports_dropped_matches(self):
        candidates = [Candidate(letter, f"Write {letter}", TASK_ID) for letter in "abcdefghij"]
        text = composer.disambiguation(candidates, total_matches=15)

        assert find_marker(text) == Marker.SELECT_TASK
        assert len(parse_candidates(text)) == 10
        assert "first 10 of 15" in text

    def test_not_found_with_hints(self):
        text = composer.task_not_found("dentist", ["Buy milk", "Write report"])

        assert '"dentist"' in text
        assert "- Buy milk" in text
        assert find_marker(text) is None

    def test_terminal_replies_have_no_marker(self):
        for text in (
            composer.no_open_tasks(),
            composer.task_deleted("Write report"),
            composer.task_deleted(None),
            composer.deletion_cancelled(),
            composer.action_failed("delete", "Task not found"),
            composer.help_text(),
        ):
            assert find_marker(text) is None

    def test_failure_includes_collaborator_text(self):
        text = composer.action_failed("create", "Title too long")
        assert "Title too long" in text

    def test_patterns_summary(self):
        text = composer.patterns_summary([
            {"type": "task_skipping", "description": "Skips a lot.", "confidence": 0.75},
        ])
        assert "**Task skipping** (75%): Skips a lot." in text

    def test_patterns_summary_empty(self):
        assert "No clear patterns" in composer.patterns_summary([])
