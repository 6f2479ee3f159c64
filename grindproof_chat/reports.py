"""
GrindProof Chat Service - Reports

The two single-shot report commands: the weekly roast and pattern analysis.
Metrics and base patterns are computed deterministically from the user's
tasks; the language model, when configured, only adds the narrative.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from grindproof_chat.extractor import parse_json_object
from grindproof_chat.llm import TextCompletionClient
from grindproof_chat.prompts import (
    PATTERN_DETECTION_SYSTEM_PROMPT,
    WEEKLY_ROAST_SYSTEM_PROMPT,
    build_data_prompt,
)
from grindproof_chat.tasks.enums import TaskStatus
from grindproof_chat.tasks.models import Task
from grindproof_chat.tasks.service import TaskServiceInterface

logger = logging.getLogger(__name__)

PATTERN_TYPES = (
    "procrastination",
    "task_skipping",
    "overcommitment",
    "vague_planning",
    "planning_without_execution",
)
MIN_PATTERN_CONFIDENCE = 0.5
SEVERITIES = ("high", "medium", "positive")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _is_overdue(task: Task, now: datetime) -> bool:
    return task.is_open and task.due_date is not None and task.due_date < now.date()


def compute_weekly_metrics(tasks: List[Task], now: datetime) -> Dict[str, Any]:
    """
    Counts for the last 7 days.

    Planned = created within the window. Overdue looks at every open task,
    however old, whose due date has passed.
    """
    since = now - timedelta(days=7)
    planned = [t for t in tasks if _as_utc(t.created_at) >= since]
    completed = [t for t in planned if t.status == TaskStatus.COMPLETED]
    skipped = [t for t in planned if t.status == TaskStatus.SKIPPED]
    overdue = [t for t in tasks if _is_overdue(t, now)]
    rate = round(len(completed) * 100 / len(planned)) if planned else 0
    return {
        "periodStart": since.date().isoformat(),
        "periodEnd": now.date().isoformat(),
        "planned": len(planned),
        "completed": len(completed),
        "skipped": len(skipped),
        "overdue": len(overdue),
        "completionRate": rate,
        "completedTitles": [t.title for t in completed],
        "skippedTitles": [t.title for t in skipped],
        "overdueTitles": [t.title for t in overdue],
    }


def default_week_summary(metrics: Dict[str, Any]) -> str:
    if metrics["planned"] == 0:
        return "Quiet week: nothing planned, nothing to roast. Plan something you can finish."
    rate = metrics["completionRate"]
    if rate >= 80:
        return "Strong week: you did what you said you would."
    if rate >= 50:
        return "Mixed week: good intentions, but execution didn't fully match the plan."
    return "Rough week: far more planned than done."


def default_insights(metrics: Dict[str, Any]) -> List[Dict[str, str]]:
    insights = [{
        "emoji": "📋",
        "text": f"Planned {metrics['planned']} tasks, finished {metrics['completed']}",
        "severity": "positive" if metrics["completionRate"] >= 80 else "medium",
    }]
    if metrics["skipped"]:
        insights.append({
            "emoji": "⏭️",
            "text": f"Skipped {metrics['skipped']} tasks this week",
            "severity": "high",
        })
    if metrics["overdue"]:
        insights.append({
            "emoji": "⏰",
            "text": f"{metrics['overdue']} tasks are past their due date",
            "severity": "high",
        })
    return insights


def detect_patterns(tasks: List[Task], now: datetime) -> List[Dict[str, Any]]:
    """Rule-based patterns; each rule yields at most one entry."""
    patterns: List[Dict[str, Any]] = []
    total = len(tasks)
    if total == 0:
        return patterns

    skipped = [t for t in tasks if t.status == TaskStatus.SKIPPED]
    completed = [t for t in tasks if t.status == TaskStatus.COMPLETED]
    open_tasks = [t for t in tasks if t.is_open]
    overdue = [t for t in tasks if _is_overdue(t, now)]
    undated = [t for t in open_tasks if t.due_date is None]

    skip_ratio = len(skipped) / total
    if len(skipped) >= 2 and skip_ratio >= 0.3:
        patterns.append({
            "type": "task_skipping",
            "description": f"You skipped {len(skipped)} of {total} tasks; skipping has become a habit.",
            "confidence": round(min(0.5 + skip_ratio / 2, 0.95), 2),
        })

    if len(overdue) >= 2:
        patterns.append({
            "type": "procrastination",
            "description": f"{len(overdue)} open tasks are past their due date and still not done.",
            "confidence": round(min(0.5 + len(overdue) / 10, 0.95), 2),
        })

    if len(undated) >= 3 and len(undated) / max(len(open_tasks), 1) >= 0.5:
        patterns.append({
            "type": "vague_planning",
            "description": f"{len(undated)} open tasks have no due date, so nothing forces them to happen.",
            "confidence": round(min(0.5 + len(undated) / 20, 0.9), 2),
        })

    due_counts: Dict[str, int] = {}
    for t in open_tasks:
        if t.due_date is not None:
            key = t.due_date.isoformat()
            due_counts[key] = due_counts.get(key, 0) + 1
    busiest = max(due_counts.values(), default=0)
    if busiest >= 5:
        patterns.append({
            "type": "overcommitment",
            "description": f"Up to {busiest} open tasks are due on a single day, more than one day can hold.",
            "confidence": round(min(0.5 + busiest / 20, 0.9), 2),
        })

    if len(tasks) >= 5 and not completed:
        patterns.append({
            "type": "planning_without_execution",
            "description": f"{len(tasks)} tasks planned and none completed: lots of planning, no execution.",
            "confidence": 0.8,
        })

    return patterns


def _clean_llm_patterns(data: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not data or not isinstance(data.get("patterns"), list):
        return []
    cleaned = []
    for p in data["patterns"]:
        if not isinstance(p, dict) or p.get("type") not in PATTERN_TYPES:
            continue
        try:
            confidence = float(p.get("confidence", 0))
        except (TypeError, ValueError):
            continue
        description = str(p.get("description") or "").strip()
        if confidence < MIN_PATTERN_CONFIDENCE or not description:
            continue
        cleaned.append({
            "type": p["type"],
            "description": description[:100],
            "confidence": round(min(confidence, 1.0), 2),
        })
    return cleaned


def _clean_insights(raw: Any) -> List[Dict[str, str]]:
    if not isinstance(raw, list):
        return []
    insights = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("text"):
            continue
        severity = item.get("severity")
        insights.append({
            "emoji": str(item.get("emoji") or "•"),
            "text": str(item["text"]),
            "severity": severity if severity in SEVERITIES else "medium",
        })
    return insights


class ReportService:
    """
    Weekly roast and pattern analysis for one user.

    LLMProviderError from the model call is not caught here; the API layer
    turns it into an error response.
    """

    def __init__(
        self,
        task_service: TaskServiceInterface,
        llm_client: Optional[TextCompletionClient] = None,
    ):
        self._task_service = task_service
        self._llm_client = llm_client

    async def weekly_roast(self, owner_id: str, now: datetime) -> Dict[str, Any]:
        tasks = await self._task_service.list_tasks(owner_id)
        metrics = compute_weekly_metrics(tasks, now)
        report = {
            "metrics": metrics,
            "insights": default_insights(metrics),
            "recommendations": [],
            "weekSummary": default_week_summary(metrics),
        }

        if self._llm_client is None:
            return report

        content = await self._llm_client.complete(
            WEEKLY_ROAST_SYSTEM_PROMPT,
            build_data_prompt("Here is this week's task data:", metrics),
        )
        data = parse_json_object(content)
        if data is None:
            logger.warning("Weekly roast narrative was not JSON, using computed summary")
            return report

        insights = _clean_insights(data.get("insights"))
        if insights:
            report["insights"] = insights
        recommendations = data.get("recommendations")
        if isinstance(recommendations, list):
            report["recommendations"] = [str(r) for r in recommendations if r]
        if isinstance(data.get("weekSummary"), str) and data["weekSummary"].strip():
            report["weekSummary"] = data["weekSummary"].strip()
        return report

    async def analyze_patterns(self, owner_id: str, now: datetime) -> Dict[str, Any]:
        tasks = await self._task_service.list_tasks(owner_id)
        patterns = detect_patterns(tasks, now)

        if self._llm_client is not None and tasks:
            stats = compute_weekly_metrics(tasks, now)
            stats["totalTasks"] = len(tasks)
            stats["detected"] = [p["type"] for p in patterns]
            content = await self._llm_client.complete(
                PATTERN_DETECTION_SYSTEM_PROMPT,
                build_data_prompt("Task statistics:", stats),
            )
            known = {p["type"] for p in patterns}
            for extra in _clean_llm_patterns(parse_json_object(content)):
                if extra["type"] not in known:
                    patterns.append(extra)
                    known.add(extra["type"])

        patterns.sort(key=lambda p: p["confidence"], reverse=True)
        return {"patterns": patterns}
