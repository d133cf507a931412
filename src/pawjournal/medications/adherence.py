"""
Medication adherence.

Expected doses come from the prescribed frequency; actual doses are the
non-skipped dose records inside the lookback window.  As-needed
medications have no expectation, so their rate is always 0.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from pawjournal.events.models import Medication, MedicationDoseRecord, MedicationFrequency, as_local_naive


@dataclass(frozen=True)
class AdherenceRate:
    medication_id: str
    rate: float
    expected_doses: int
    actual_doses: int
    days: int


def expected_doses(medication: Medication, days: int) -> int:
    """Doses the prescription calls for over *days* days."""
    if days <= 0:
        return 0
    slots = len(medication.scheduled_times)
    match medication.frequency:
        case MedicationFrequency.DAILY:
            return days * slots
        case MedicationFrequency.TWICE_DAILY:
            # Fixed at two per day regardless of how many times are listed
            return days * 2
        case MedicationFrequency.EVERY_OTHER_DAY:
            return (days // 2) * slots
        case MedicationFrequency.WEEKLY:
            return (days // 7) * slots
        case _:
            return 0


def adherence_rate(
    medication: Medication,
    dose_records: Iterable[MedicationDoseRecord],
    days: int = 7,
    now: datetime | None = None,
) -> AdherenceRate:
    """Fraction of expected doses given in the last *days* days, capped at 1.0.

    Args:
        medication: The prescription.
        dose_records: Records to consider; other medications' records are ignored.
        days: Lookback window.
        now: Reference time, defaults to ``datetime.now()``.
    """
    now = as_local_naive(now) if now else datetime.now()
    since = now - timedelta(days=days)
    actual = sum(
        1
        for r in dose_records
        if r.medication_id == medication.id and not r.skipped and r.timestamp >= since
    )
    expected = expected_doses(medication, days)
    rate = min(actual / expected, 1.0) if expected > 0 else 0.0
    return AdherenceRate(
        medication_id=medication.id,
        rate=rate,
        expected_doses=expected,
        actual_doses=actual,
        days=days,
    )


def todays_doses(
    medication: Medication,
    dose_records: Iterable[MedicationDoseRecord],
    now: datetime | None = None,
) -> list[MedicationDoseRecord]:
    """Dose records (given or skipped) logged since local midnight."""
    now = as_local_naive(now) if now else datetime.now()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)
    return sorted(
        (r for r in dose_records if r.medication_id == medication.id and start <= r.timestamp < end),
        key=lambda r: r.timestamp,
    )


def dose_given_today(
    medication: Medication,
    dose_records: Iterable[MedicationDoseRecord],
    now: datetime | None = None,
) -> bool:
    return any(not r.skipped for r in todays_doses(medication, dose_records, now))
