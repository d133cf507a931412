"""
Composite wellness score.

Four sub-scores, each on 0-100 and computed independently from a single
window aggregate, combined into a weighted mean:

- activity: minutes logged against ``daily_activity_goal_minutes * days``
- nutrition: meals per day against ``target_meals_per_day`` (80 points)
  plus water logs per day (20 points, so missing water logs cost)
- wellness: starts at 100, minus symptom, poor-digestion and low-mood penalties
- consistency: share of days in the window with at least one log

Band thresholds (80 / 60) are fixed; everything else is in ``ScoreConfig``.
These are heuristic wellness indicators, not a diagnosis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .aggregator import WindowAggregate

POSITIVE_THRESHOLD = 80
NEUTRAL_THRESHOLD = 60

_LABELS = (
    (90, "Excellent"),
    (80, "Great"),
    (70, "Good"),
    (60, "Fair"),
)
ATTENTION_LABEL = "Needs Attention"


class ScoreBand(StrEnum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    ATTENTION = "attention"

    @property
    def color(self) -> str:
        return {"positive": "green", "neutral": "yellow", "attention": "red"}[self.value]


def score_band(overall: int) -> ScoreBand:
    if overall >= POSITIVE_THRESHOLD:
        return ScoreBand.POSITIVE
    if overall >= NEUTRAL_THRESHOLD:
        return ScoreBand.NEUTRAL
    return ScoreBand.ATTENTION


def score_label(overall: int) -> str:
    for floor, label in _LABELS:
        if overall >= floor:
            return label
    return ATTENTION_LABEL


@dataclass(frozen=True)
class HealthScore:
    overall: int
    activity: int
    nutrition: int
    wellness: int
    consistency: int

    @property
    def band(self) -> ScoreBand:
        return score_band(self.overall)

    @property
    def label(self) -> str:
        return score_label(self.overall)

    @classmethod
    def empty(cls) -> HealthScore:
        return cls(overall=0, activity=0, nutrition=0, wellness=0, consistency=0)


def _default_weights() -> dict[str, float]:
    return {"activity": 1.0, "nutrition": 1.0, "wellness": 1.0, "consistency": 1.0}


@dataclass(frozen=True)
class ScoreConfig:
    """Sub-score parameters.

    Attributes:
        daily_activity_goal_minutes: Walk + play minutes per day for a full activity score.
        target_meals_per_day: Meal logs per day for the full meal component.
        water_logs_per_day: Water logs per day for the full water component.
        symptom_penalty: Wellness points lost per symptom without a severity.
        severity_penalty: Points lost per severity level when one is recorded.
        digestion_penalty: Points lost per poor-digestion event.
        mood_penalty: Points lost per mood point below 3.0.
        weights: Relative weight of each sub-score in ``overall``.
    """

    daily_activity_goal_minutes: int = 30
    target_meals_per_day: int = 2
    water_logs_per_day: int = 1
    symptom_penalty: int = 10
    severity_penalty: int = 5
    digestion_penalty: int = 10
    mood_penalty: int = 10
    weights: dict[str, float] = field(default_factory=_default_weights)

    @classmethod
    def from_config(cls, config: Any) -> ScoreConfig:
        weights = {
            name: config.get_float(f"score.weights.{name}", default) for name, default in _default_weights().items()
        }
        return cls(
            daily_activity_goal_minutes=config.get_int("score.daily_activity_goal_minutes", 30),
            target_meals_per_day=config.get_int("score.target_meals_per_day", 2),
            water_logs_per_day=config.get_int("score.water_logs_per_day", 1),
            symptom_penalty=config.get_int("score.symptom_penalty", 10),
            severity_penalty=config.get_int("score.severity_penalty", 5),
            digestion_penalty=config.get_int("score.digestion_penalty", 10),
            mood_penalty=config.get_int("score.mood_penalty", 10),
            weights=weights,
        )


def _clamp(value: float) -> int:
    return int(max(0, min(100, round(value))))


def activity_score(aggregate: WindowAggregate, config: ScoreConfig) -> int:
    goal = config.daily_activity_goal_minutes * aggregate.days
    if goal <= 0:
        return 0
    return _clamp(aggregate.activity_minutes / goal * 100)


def nutrition_score(aggregate: WindowAggregate, config: ScoreConfig) -> int:
    meals_per_day = aggregate.meals_count / aggregate.days
    meal_part = min(1.0, meals_per_day / config.target_meals_per_day) if config.target_meals_per_day > 0 else 1.0
    water_target = config.water_logs_per_day * aggregate.days
    water_part = min(1.0, aggregate.water_count / water_target) if water_target > 0 else 1.0
    return _clamp(meal_part * 80 + water_part * 20)


def wellness_score(aggregate: WindowAggregate, config: ScoreConfig) -> int:
    score = 100.0
    for symptom in aggregate.symptom_events:
        if symptom.severity_level is not None:
            score -= symptom.severity_level * config.severity_penalty
        else:
            score -= config.symptom_penalty
    score -= len(aggregate.poor_digestion_events) * config.digestion_penalty
    if aggregate.average_mood is not None and aggregate.average_mood < 3.0:
        score -= (3.0 - aggregate.average_mood) * config.mood_penalty
    return _clamp(score)


def consistency_score(logged_days: int, days: int) -> int:
    return _clamp(max(0, logged_days) / max(1, days) * 100)


def calculate_health_score(
    aggregate: WindowAggregate,
    logged_days: int | None = None,
    config: ScoreConfig | None = None,
) -> HealthScore:
    """Score a window.

    Args:
        aggregate: Usually the last 7 days.
        logged_days: Logging-consistency measure (days with at least one
            log, or a streak).  Defaults to ``aggregate.logged_days``.
        config: Sub-score parameters; defaults apply when omitted.

    Returns:
        A HealthScore; all zeros when the window has no events.
    """
    if aggregate.is_empty:
        return HealthScore.empty()

    cfg = config or ScoreConfig()
    parts = {
        "activity": activity_score(aggregate, cfg),
        "nutrition": nutrition_score(aggregate, cfg),
        "wellness": wellness_score(aggregate, cfg),
        "consistency": consistency_score(
            aggregate.logged_days if logged_days is None else logged_days, aggregate.days
        ),
    }

    total_weight = sum(max(0.0, cfg.weights.get(k, 0.0)) for k in parts)
    if total_weight <= 0:
        overall = sum(parts.values()) / len(parts)
    else:
        overall = sum(v * max(0.0, cfg.weights.get(k, 0.0)) for k, v in parts.items()) / total_weight

    return HealthScore(overall=_clamp(overall), **parts)
