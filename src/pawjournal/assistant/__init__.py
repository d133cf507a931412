"""
Remote assistant integration: context building, the LiteLLM client and
reply parsing.

Core module (no heavy deps).  Install ``pawjournal[llm]`` for the default
LiteLLM transport.
"""

from .client import AssistantClient, AssistantConfig
from .context import (
    PetProfile,
    build_care_plan_prompt,
    build_digest_prompt,
    build_triage_prompt,
    events_to_context,
)
from .parsing import (
    CarePlanDraft,
    LabeledReplyParser,
    PlanMilestone,
    PlanTask,
    TriageResult,
    TriageUrgency,
    parse_care_plan_response,
    parse_triage_response,
)

__all__ = [
    "AssistantClient",
    "AssistantConfig",
    "CarePlanDraft",
    "LabeledReplyParser",
    "PetProfile",
    "PlanMilestone",
    "PlanTask",
    "TriageResult",
    "TriageUrgency",
    "build_care_plan_prompt",
    "build_digest_prompt",
    "build_triage_prompt",
    "events_to_context",
    "parse_care_plan_response",
    "parse_triage_response",
]
