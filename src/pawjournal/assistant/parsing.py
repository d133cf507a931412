"""Line-oriented parsing of assistant replies.

Replies are requested in a labelled format::

    URGENCY: SOON
    ASSESSMENT: ...
    RECOMMENDATIONS:
    - first
    - second

``LabeledReplyParser`` walks the text line by line with one piece of state
(the list section it is in).  Scalar labels capture the rest of their
line; list labels open a section that collects ``-`` items until the next
label.  Everything else is kept as loose text.  Parsing never raises;
each structured result fills missing sections with defaults.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum

_LABEL_RE = re.compile(r"^[*#\s]*([A-Za-z][A-Za-z ]*?)[*\s]*:[*\s]*(.*)$")
_BULLET_RE = re.compile(r"^(?:[-•*]|\d+[.)])\s*")
_DAY_RE = re.compile(r"day\s*(\d+)\s*:?\s*", re.IGNORECASE)


@dataclass
class ParsedReply:
    fields: dict[str, str] = field(default_factory=dict)
    lists: dict[str, list[str]] = field(default_factory=dict)
    loose: list[str] = field(default_factory=list)


class LabeledReplyParser:
    """Split a reply into labelled scalar fields and list sections.

    Args:
        scalar_labels: Labels whose value is the remainder of the line.
        list_labels: Labels that start a bulleted section.
    """

    def __init__(self, scalar_labels: tuple[str, ...] = (), list_labels: tuple[str, ...] = ()):
        self.scalar_labels = {label.upper() for label in scalar_labels}
        self.list_labels = {label.upper() for label in list_labels}

    def parse(self, text: str | None) -> ParsedReply:
        reply = ParsedReply()
        section: str | None = None

        for raw in (text or "").splitlines():
            line = raw.strip()
            if not line:
                continue

            label, value = self._match_label(line)
            if label in self.scalar_labels:
                reply.fields[label] = value
                section = None
            elif label in self.list_labels:
                section = label
                items = reply.lists.setdefault(label, [])
                if value:
                    items.append(value)
            elif section and _BULLET_RE.match(line):
                item = _BULLET_RE.sub("", line, count=1).strip()
                if item:
                    reply.lists[section].append(item)
            else:
                reply.loose.append(line)

        return reply

    @staticmethod
    def _match_label(line: str) -> tuple[str | None, str]:
        if _BULLET_RE.match(line) and not line.startswith("*"):
            return None, ""
        m = _LABEL_RE.match(line)
        if not m:
            return None, ""
        return m.group(1).strip().upper(), m.group(2).strip()


# ── Triage ────────────────────────────────────────────────────────────


class TriageUrgency(StrEnum):
    EMERGENCY = "EMERGENCY"
    URGENT = "URGENT"
    SOON = "SOON"
    MONITOR = "MONITOR"

    @property
    def title(self) -> str:
        return {
            "EMERGENCY": "Emergency",
            "URGENT": "Urgent Care Needed",
            "SOON": "See Vet Soon",
            "MONITOR": "Monitor at Home",
        }[self.value]

    @property
    def guidance(self) -> str:
        return {
            "EMERGENCY": "Seek immediate veterinary care",
            "URGENT": "Contact your vet today",
            "SOON": "Schedule a vet visit within a few days",
            "MONITOR": "Keep an eye on symptoms and log any changes",
        }[self.value]

    @classmethod
    def from_text(cls, text: str) -> TriageUrgency:
        upper = (text or "").upper()
        for level in (cls.EMERGENCY, cls.URGENT, cls.SOON):
            if level.value in upper:
                return level
        return cls.MONITOR


@dataclass(frozen=True)
class TriageResult:
    urgency: TriageUrgency
    assessment: str
    recommendations: list[str]


_triage_parser = LabeledReplyParser(scalar_labels=("URGENCY", "ASSESSMENT"), list_labels=("RECOMMENDATIONS",))


def parse_triage_response(text: str | None, pet_name: str) -> TriageResult:
    reply = _triage_parser.parse(text)

    urgency = TriageUrgency.from_text(reply.fields.get("URGENCY", ""))
    assessment = reply.fields.get("ASSESSMENT") or " ".join(reply.loose)
    if not assessment:
        assessment = f"Based on the symptoms described, we recommend monitoring {pet_name} closely."

    recommendations = reply.lists.get("RECOMMENDATIONS") or [
        "Monitor the symptom closely for any changes",
        f"Ensure {pet_name} stays hydrated",
        "Contact your vet if symptoms worsen or persist",
    ]
    return TriageResult(urgency=urgency, assessment=assessment, recommendations=recommendations)


# ── Care plan ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PlanTask:
    title: str
    description: str | None = None


@dataclass(frozen=True)
class PlanMilestone:
    day: int
    description: str


@dataclass(frozen=True)
class CarePlanDraft:
    title: str
    description: str
    tasks: list[PlanTask]
    milestones: list[PlanMilestone]


_plan_parser = LabeledReplyParser(scalar_labels=("TITLE", "DESCRIPTION"), list_labels=("TASKS", "MILESTONES"))


def _parse_task(item: str) -> PlanTask | None:
    title, _, description = item.partition("|")
    title = title.strip()
    if not title:
        return None
    return PlanTask(title=title, description=description.strip() or None)


def _parse_milestone(item: str) -> PlanMilestone | None:
    m = _DAY_RE.search(item)
    if not m:
        return None
    description = _DAY_RE.sub("", item, count=1).strip()
    return PlanMilestone(day=int(m.group(1)), description=description)


def parse_care_plan_response(text: str | None, pet_name: str, duration_days: int) -> CarePlanDraft:
    reply = _plan_parser.parse(text)

    tasks = [t for t in map(_parse_task, reply.lists.get("TASKS", [])) if t]
    if not tasks:
        tasks = [
            PlanTask("Morning check-in", "Observe energy and appetite"),
            PlanTask("Activity session", "30 minutes of exercise"),
            PlanTask("Evening log", "Record any changes or concerns"),
        ]

    milestones = [m for m in map(_parse_milestone, reply.lists.get("MILESTONES", [])) if m]
    if not milestones:
        milestones = [
            PlanMilestone(max(1, duration_days // 2), "Mid-plan check-in"),
            PlanMilestone(duration_days, "Plan completion review"),
        ]

    return CarePlanDraft(
        title=reply.fields.get("TITLE") or f"{pet_name}'s Care Plan",
        description=reply.fields.get("DESCRIPTION", ""),
        tasks=tasks,
        milestones=milestones,
    )
