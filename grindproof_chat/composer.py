"""
GrindProof Chat Service - Response Composer

Renders assistant replies as markdown. Replies that leave a flow open embed
a marker (via the markers module) so the next turn can pick it up; terminal
and error replies never do.
"""

from typing import Any, Dict, List, Optional, Sequence

from grindproof_chat.markers import (
    Candidate,
    Marker,
    render_candidate,
    render_marker,
    render_task_id,
)
from grindproof_chat.schemas import TaskDraft
from grindproof_chat.tasks.models import Task
from grindproof_chat.validator import ClarificationQuestion

HELP_TEXT = (
    "I can help you manage your tasks. Try:\n"
    "- **add task:** workout tomorrow at 6am\n"
    "- **delete task:** write report\n"
    "- **roast me** for your weekly accountability report\n"
    "- **analyze my patterns** to spot behavioral patterns"
)


def _describe_schedule(due_date: Optional[str], start_time: Optional[str], end_time: Optional[str]) -> str:
    if not due_date:
        return ""
    when = f" on {due_date}"
    if start_time and end_time:
        when += f" from {start_time} to {end_time}"
    elif start_time:
        when += f" at {start_time}"
    return when


def task_created(task: Task) -> str:
    due = task.due_date.isoformat() if task.due_date else None
    schedule = _describe_schedule(due, task.start_time, task.end_time)
    return f"✅ Created task **{task.title}**{schedule} ({task.priority.value} priority)."


def create_clarification(draft: TaskDraft, questions: Sequence[ClarificationQuestion]) -> str:
    lines = [f"Almost there! Before I add **{draft.title}**, a quick question:"]
    if len(questions) > 1:
        lines[0] = f"Almost there! Before I add **{draft.title}**, a few quick questions:"
    lines.extend(f"- {q.prompt}" for q in questions)
    lines.append("")
    lines.append(render_marker(Marker.CREATE_TASK))
    return "\n".join(lines)


def title_needed() -> str:
    return "\n".join([
        "What should the task be called? Tell me what you want to get done.",
        "",
        render_marker(Marker.CREATE_TASK),
    ])


def delete_confirmation(task_id: str, title: str) -> str:
    return "\n".join([
        f"Delete **{title}**? Reply **yes** to confirm or **no** to cancel.",
        "",
        render_task_id(task_id),
        render_marker(Marker.DELETE_TASK),
    ])


def disambiguation(candidates: Sequence[Candidate], total_matches: int) -> str:
    lines = ["I found several matching tasks. Which one should I delete? Reply with the letter.", ""]
    lines.extend(render_candidate(c) for c in candidates)
    if total_matches > len(candidates):
        lines.append("")
        lines.append(f"Showing the first {len(candidates)} of {total_matches} matches. Be more specific to narrow it down.")
    lines.append("")
    lines.append(render_marker(Marker.SELECT_TASK))
    return "\n".join(lines)


def task_not_found(search_term: str, hint_titles: Sequence[str]) -> str:
    if search_term:
        lines = [f"I couldn't find a pending task matching \"{search_term}\"."]
    else:
        lines = ["Which task should I delete? Tell me its name."]
    if hint_titles:
        lines.append("")
        lines.append("Your pending tasks:")
        lines.extend(f"- {title}" for title in hint_titles)
    return "\n".join(lines)


def no_open_tasks() -> str:
    return "You don't have any pending tasks to delete."


def task_deleted(title: Optional[str]) -> str:
    if title:
        return f"🗑️ Deleted task **{title}**."
    return "🗑️ Task deleted."


def deletion_cancelled() -> str:
    return "OK, I won't delete it."


def action_failed(action: str, detail: str) -> str:
    return f"❌ Couldn't {action} the task: {detail}"


def tasks_unavailable(detail: str) -> str:
    return f"❌ Couldn't load your tasks: {detail}"


def weekly_roast(report: Dict[str, Any]) -> str:
    metrics = report["metrics"]
    lines = [
        "## 🔥 Weekly Roast",
        "",
        f"**{report['weekSummary']}**",
        "",
        f"Planned {metrics['planned']}, completed {metrics['completed']}, "
        f"skipped {metrics['skipped']}, overdue {metrics['overdue']} "
        f"({metrics['completionRate']}% completion).",
    ]
    insights: List[Dict[str, Any]] = report.get("insights") or []
    if insights:
        lines.append("")
        lines.append("### Insights")
        lines.extend(f"- {i.get('emoji', '•')} {i['text']}" for i in insights)
    recommendations: List[str] = report.get("recommendations") or []
    if recommendations:
        lines.append("")
        lines.append("### Recommendations")
        lines.extend(f"- {r}" for r in recommendations)
    return "\n".join(lines)


def patterns_summary(patterns: Sequence[Dict[str, Any]]) -> str:
    if not patterns:
        return "## 🔍 Patterns\n\nNo clear patterns yet. Keep logging tasks and check back later."
    lines = ["## 🔍 Patterns", ""]
    for p in patterns:
        label = p["type"].replace("_", " ").capitalize()
        lines.append(f"- **{label}** ({round(p['confidence'] * 100)}%): {p['description']}")
    return "\n".join(lines)


def help_text() -> str:
    return HELP_TEXT
