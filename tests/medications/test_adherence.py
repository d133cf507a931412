"""Tests for pawjournal.medications.adherence."""

from datetime import timedelta, timezone

import pytest

from pawjournal.events.models import MedicationDoseRecord, MedicationFrequency
from pawjournal.medications.adherence import adherence_rate, dose_given_today, expected_doses, todays_doses


def _doses(med, now, count, **fields):
    return [
        MedicationDoseRecord(medication_id=med.id, timestamp=now - timedelta(hours=6 * i), **fields)
        for i in range(count)
    ]


class TestExpectedDoses:
    @pytest.mark.parametrize(
        "frequency, times, days, expected",
        [
            (MedicationFrequency.DAILY, ((8, 0), (20, 0)), 7, 14),
            (MedicationFrequency.DAILY, (), 7, 0),
            (MedicationFrequency.TWICE_DAILY, ((8, 0),), 7, 14),
            (MedicationFrequency.EVERY_OTHER_DAY, ((8, 0),), 7, 3),
            (MedicationFrequency.WEEKLY, ((8, 0),), 7, 1),
            (MedicationFrequency.WEEKLY, ((8, 0),), 14, 2),
            (MedicationFrequency.AS_NEEDED, ((8, 0),), 7, 0),
            (MedicationFrequency.DAILY, ((8, 0),), 0, 0),
        ],
    )
    def test_by_frequency(self, make_medication, frequency, times, days, expected):
        assert expected_doses(make_medication(frequency, times), days) == expected


class TestAdherenceRate:
    @pytest.mark.smoke
    def test_daily_two_times(self, make_medication, now):
        med = make_medication(MedicationFrequency.DAILY, ((8, 0), (20, 0)))
        result = adherence_rate(med, _doses(med, now, 10), days=7, now=now)
        assert result.expected_doses == 14
        assert result.actual_doses == 10
        assert result.rate == pytest.approx(10 / 14)

    @pytest.mark.smoke
    def test_as_needed_is_zero(self, make_medication, now):
        med = make_medication(MedicationFrequency.AS_NEEDED)
        result = adherence_rate(med, _doses(med, now, 5), now=now)
        assert result.rate == 0.0
        assert result.actual_doses == 5

    def test_capped_at_one(self, make_medication, now):
        med = make_medication()
        result = adherence_rate(med, _doses(med, now, 20), now=now)
        assert result.rate == 1.0

    def test_skipped_and_old_doses_excluded(self, make_medication, now):
        med = make_medication()
        records = [
            MedicationDoseRecord(medication_id=med.id, timestamp=now - timedelta(days=1)),
            MedicationDoseRecord(medication_id=med.id, timestamp=now - timedelta(days=2), skipped=True),
            MedicationDoseRecord(medication_id=med.id, timestamp=now - timedelta(days=8)),
            MedicationDoseRecord(medication_id="other", timestamp=now),
        ]
        result = adherence_rate(med, records, now=now)
        assert result.actual_doses == 1
        assert result.rate == pytest.approx(1 / 7)

    def test_no_scheduled_times(self, make_medication, now):
        med = make_medication(times=())
        assert adherence_rate(med, _doses(med, now, 3), now=now).rate == 0.0

    def test_synced_doses_and_aware_now(self, make_medication, now):
        med = make_medication(MedicationFrequency.DAILY, ((8, 0), (20, 0)))
        synced = [
            MedicationDoseRecord(medication_id=med.id, timestamp=record.timestamp.astimezone(timezone.utc))
            for record in _doses(med, now, 10)
        ]
        result = adherence_rate(med, synced, days=7, now=now.astimezone(timezone.utc))
        assert result.actual_doses == 10


class TestToday:
    def test_todays_doses_sorted(self, make_medication, now):
        med = make_medication()
        midnight = now.replace(hour=0, minute=0)
        records = [
            MedicationDoseRecord(medication_id=med.id, timestamp=midnight + timedelta(hours=9)),
            MedicationDoseRecord(medication_id=med.id, timestamp=midnight + timedelta(hours=1)),
            MedicationDoseRecord(medication_id=med.id, timestamp=midnight - timedelta(minutes=1)),
        ]
        doses = todays_doses(med, records, now=now)
        assert [d.timestamp.hour for d in doses] == [1, 9]

    def test_given_today(self, make_medication, now):
        med = make_medication()
        skipped = [MedicationDoseRecord(medication_id=med.id, timestamp=now, skipped=True)]
        assert not dose_given_today(med, skipped, now=now)
        given = skipped + [MedicationDoseRecord(medication_id=med.id, timestamp=now)]
        assert dose_given_today(med, given, now=now)
