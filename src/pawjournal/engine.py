"""
HealthEngine: the façade a host app talks to.

Wires the event store to the aggregator, pattern detector and score
calculator, and (optionally) to the remote assistant.  Every analytic
result is recomputed per call from a fresh store snapshot; the engine
keeps no cache and no per-pet state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from loguru import logger

from pawjournal.analytics.aggregator import WindowAggregate, WindowAggregator
from pawjournal.analytics.digest import WeeklyDigest, build_weekly_digest
from pawjournal.analytics.patterns import PatternThresholds
from pawjournal.analytics.score import HealthScore, ScoreConfig, calculate_health_score
from pawjournal.assistant.client import AssistantClient
from pawjournal.assistant.context import (
    PetProfile,
    build_care_plan_prompt,
    build_digest_prompt,
    build_triage_prompt,
    events_to_context,
)
from pawjournal.assistant.parsing import CarePlanDraft, TriageResult, parse_care_plan_response, parse_triage_response
from pawjournal.core.exceptions import AssistantError
from pawjournal.events.models import EventCategory, HealthEvent, as_local_naive, edit_event
from pawjournal.events.store import EventStore, EventWriter, WriteResult, guarded_write


@dataclass(frozen=True)
class TriageOutcome:
    """Result of a symptom triage request.

    The symptom event is saved whether or not the assistant answered;
    ``error_message`` is the user-facing text when it did not.
    """

    event: HealthEvent
    write: WriteResult
    result: TriageResult | None = None
    error_message: str | None = None


class HealthEngine:
    """
    Args:
        store: Event source (and writer, for the logging helpers).
        thresholds: Pattern detector cut-offs.
        score_config: Score calculator parameters.
        assistant: Remote assistant; only needed for the async helpers.
        window_days: Length of the digest / score window.
    """

    def __init__(
        self,
        store: EventStore,
        thresholds: PatternThresholds | None = None,
        score_config: ScoreConfig | None = None,
        assistant: AssistantClient | None = None,
        window_days: int = 7,
    ):
        self.store = store
        self.aggregator = WindowAggregator(store)
        self.thresholds = thresholds or PatternThresholds()
        self.score_config = score_config or ScoreConfig()
        self.assistant = assistant
        self.window_days = window_days

    @classmethod
    def from_config(cls, config: Any, store: EventStore, assistant: AssistantClient | None = None) -> HealthEngine:
        return cls(
            store=store,
            thresholds=PatternThresholds.from_config(config),
            score_config=ScoreConfig.from_config(config),
            assistant=assistant,
            window_days=config.get_int("analytics.window_days", 7),
        )

    # ── Analytics ─────────────────────────────────────────────────────

    @staticmethod
    def _now(now: datetime | None) -> datetime:
        return as_local_naive(now) if now else datetime.now()

    def window(self, pet_id: str, range_start: datetime, range_end: datetime) -> WindowAggregate:
        return self.aggregator.aggregate(pet_id, as_local_naive(range_start), as_local_naive(range_end))

    def weekly_windows(self, pet_id: str, now: datetime | None = None) -> tuple[WindowAggregate, WindowAggregate]:
        """``(current, previous)`` windows ending at *now*."""
        return self.aggregator.week_over_week(pet_id, self._now(now), self.window_days)

    def weekly_digest(self, pet_id: str | None, pet_name: str, now: datetime | None = None) -> WeeklyDigest:
        """Digest for *pet_id*; an empty digest when no pet is selected."""
        if not pet_id:
            return WeeklyDigest(pet_id="")
        current, previous = self.weekly_windows(pet_id, now)
        return build_weekly_digest(current, previous, pet_name, self.thresholds)

    def health_score(self, pet_id: str | None, now: datetime | None = None) -> HealthScore:
        if not pet_id:
            return HealthScore.empty()
        current, _ = self.weekly_windows(pet_id, now)
        return calculate_health_score(current, config=self.score_config)

    def recent_events(self, pet_id: str, now: datetime | None = None) -> list[HealthEvent]:
        """Events in the trailing window; nothing dated after *now*."""
        now = self._now(now)
        return self.store.query(pet_id, range_start=now - timedelta(days=self.window_days), range_end=now)

    # ── Event writes ──────────────────────────────────────────────────

    def _writer(self) -> EventWriter:
        if not isinstance(self.store, EventWriter):
            raise TypeError(f"{type(self.store).__name__} does not support writes")
        return self.store

    def log_event(self, event: HealthEvent) -> WriteResult:
        writer = self._writer()
        return guarded_write(lambda: writer.add_event(event), event.id, "save event")

    def edit_event(self, event: HealthEvent, **changes) -> tuple[HealthEvent, WriteResult]:
        """Apply *changes* to *event*, flag it for re-sync and persist it.

        Returns the edited event (the caller's optimistic state) and the
        write result, so a failed save can be rolled back.
        """
        writer = self._writer()
        edited = edit_event(event, **changes)
        return edited, guarded_write(lambda: writer.update_event(edited), edited.id, "update event")

    def delete_event(self, event_id: str) -> WriteResult:
        writer = self._writer()
        return guarded_write(lambda: writer.delete_event(event_id), event_id, "delete event")

    # ── Assistant ─────────────────────────────────────────────────────

    def _require_assistant(self) -> AssistantClient:
        if self.assistant is None:
            raise AssistantError("No assistant configured", user_message="The assistant is not available.")
        return self.assistant

    async def ask(self, question: str, profile: PetProfile, pet_id: str, now: datetime | None = None) -> str:
        """Free-form question with the pet's recent events attached."""
        assistant = self._require_assistant()
        events = events_to_context(self.recent_events(pet_id, now))
        return await assistant.complete(question, pet_profile=profile, recent_events=events)

    async def weekly_summary(self, profile: PetProfile, pet_id: str, now: datetime | None = None) -> str:
        """Natural-language digest; the local digest is unaffected by failures."""
        assistant = self._require_assistant()
        digest = self.weekly_digest(pet_id, profile.name, now)
        events = events_to_context(self.recent_events(pet_id, now))
        return await assistant.complete(
            build_digest_prompt(profile.name, digest), pet_profile=profile, recent_events=events
        )

    async def triage_symptom(
        self,
        profile: PetProfile,
        pet_id: str,
        symptom_type: str,
        severity: int,
        duration: str,
        appetite_change: str,
        behavior_change: str,
        notes: str = "",
        images: list[str] | None = None,
    ) -> TriageOutcome:
        """Ask for a triage assessment and log the symptom either way."""
        result: TriageResult | None = None
        error_message: str | None = None
        prompt = build_triage_prompt(symptom_type, severity, duration, appetite_change, behavior_change, notes)
        try:
            reply = await self._require_assistant().complete(prompt, pet_profile=profile, images=images)
            result = parse_triage_response(reply, profile.name)
        except AssistantError as e:
            logger.warning(f"Triage unavailable for pet {pet_id}: {e}")
            error_message = "Unable to analyze symptoms. The symptom will still be saved."

        event_notes = f"Duration: {duration}\nAppetite: {appetite_change}\nBehavior: {behavior_change}"
        if notes:
            event_notes += f"\nNotes: {notes}"
        if result is not None:
            event_notes += f"\n\nTriage: {result.urgency.title}\n{result.assessment}"

        event = HealthEvent(
            pet_id=pet_id,
            category=EventCategory.SYMPTOM,
            timestamp=datetime.now(),
            notes=event_notes,
            symptom_type=symptom_type,
            severity_level=min(5, max(1, severity)),
        )
        return TriageOutcome(event=event, write=self.log_event(event), result=result, error_message=error_message)

    async def care_plan(
        self,
        profile: PetProfile,
        pet_id: str,
        goals: list[str],
        duration_days: int = 14,
        now: datetime | None = None,
    ) -> CarePlanDraft:
        assistant = self._require_assistant()
        events = events_to_context(self.recent_events(pet_id, now))
        reply = await assistant.complete(
            build_care_plan_prompt(profile.name, goals, duration_days), pet_profile=profile, recent_events=events
        )
        return parse_care_plan_response(reply, profile.name, duration_days)
