"""Structured context and prompts sent to the remote assistant."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from typing import Any

from pawjournal.analytics.digest import WeeklyDigest
from pawjournal.events.models import HealthEvent

_EVENT_FIELDS = (
    "duration_minutes",
    "meal_type",
    "mood_level",
    "symptom_type",
    "severity_level",
    "digestion_quality",
    "amount",
    "water_amount",
    "appointment_type",
    "location",
)


@dataclass
class PetProfile:
    """What the assistant is told about the pet."""

    name: str
    species: str = "dog"
    breed: str | None = None
    age: str | None = None
    weight: str | None = None
    sex: str | None = None
    health_concerns: list[str] = field(default_factory=list)
    allergies: list[str] = field(default_factory=list)
    current_medications: list[str] = field(default_factory=list)
    food_type: str | None = None
    feeding_schedule: str | None = None

    def to_context(self) -> dict[str, Any]:
        """Profile as a dict, dropping empty fields."""
        return {k: v for k, v in asdict(self).items() if v not in (None, "", [])}


def event_to_context(event: HealthEvent) -> dict[str, Any]:
    item: dict[str, Any] = {
        "category": str(event.category),
        "timestamp": event.timestamp.isoformat(),
    }
    if event.notes:
        item["notes"] = event.notes
    for name in _EVENT_FIELDS:
        value = getattr(event, name)
        if value not in (None, ""):
            item[name] = value
    return item


def events_to_context(events: Iterable[HealthEvent], limit: int | None = None) -> list[dict[str, Any]]:
    """Serialize events newest first, keeping at most *limit*."""
    ordered = sorted(events, key=lambda e: e.timestamp, reverse=True)
    if limit is not None:
        ordered = ordered[:limit]
    return [event_to_context(e) for e in ordered]


def build_digest_prompt(pet_name: str, digest: WeeklyDigest | None = None) -> str:
    lines = [
        f"Please provide a brief weekly health digest summary for {pet_name}. Focus on:",
        "1. Overall health status this week",
        "2. Any concerning patterns you notice",
        "3. One specific actionable recommendation",
        "",
        "Keep it concise (2-3 short paragraphs) and encouraging. "
        "Don't repeat data I can already see - give me insights and recommendations.",
    ]
    if digest is not None and digest.patterns:
        lines.append("")
        lines.append("Patterns detected on the device:")
        lines.extend(f"- {p.title}: {p.description}" for p in digest.patterns)
    return "\n".join(lines)


def build_triage_prompt(
    symptom_type: str,
    severity: int,
    duration: str,
    appetite_change: str,
    behavior_change: str,
    notes: str = "",
) -> str:
    return "\n".join(
        [
            "I need a symptom triage assessment. Please analyze and respond in this exact format:",
            "",
            "URGENCY: [EMERGENCY/URGENT/SOON/MONITOR]",
            "ASSESSMENT: [2-3 sentence assessment]",
            "RECOMMENDATIONS:",
            "- [recommendation 1]",
            "- [recommendation 2]",
            "- [recommendation 3]",
            "",
            "Symptom details:",
            f"- Type: {symptom_type}",
            f"- Severity: {severity}/5",
            f"- Duration: {duration}",
            f"- Appetite: {appetite_change}",
            f"- Behavior: {behavior_change}",
            f"- Additional notes: {notes or 'None'}",
            "",
            "Be conservative - if in doubt, recommend veterinary consultation. "
            "Use EMERGENCY only for life-threatening situations.",
        ]
    )


def build_care_plan_prompt(pet_name: str, goals: list[str], duration_days: int) -> str:
    return "\n".join(
        [
            f"Create a {duration_days}-day care plan for {pet_name} focused on: {', '.join(goals)}",
            "",
            "Respond in this exact format:",
            "TITLE: [Short plan title]",
            "DESCRIPTION: [2-3 sentence overview]",
            "TASKS:",
            "- [Daily task 1]|[Optional brief description]",
            "- [Daily task 2]|[Optional brief description]",
            "- [Daily task 3]|[Optional brief description]",
            "MILESTONES:",
            "- Day [X]: [Milestone description]",
            "- Day [X]: [Milestone description]",
            "",
            "Make tasks specific, actionable, and achievable. Include 3-5 daily tasks and 2-3 milestones.",
            "Consider the pet's health history when creating the plan.",
        ]
    )
