"""Medication service: create, update, delete and dose logging.

Takes its repository and reminder scheduler as constructor arguments; no
module-level shared state.  Writes go to the repository first; reminders
are only touched once the write succeeded, and a failed write comes back
as a ``WriteResult`` for the caller to retry or roll back.
"""

from __future__ import annotations

from datetime import datetime

from loguru import logger

from pawjournal.events.models import Medication, MedicationDoseRecord
from pawjournal.events.store import MedicationRepository, WriteResult, guarded_write

from .adherence import AdherenceRate, adherence_rate, dose_given_today, todays_doses
from .reminders import ReminderScheduler


class MedicationService:
    def __init__(self, repository: MedicationRepository, reminders: ReminderScheduler):
        self.repository = repository
        self.reminders = reminders

    def add_medication(self, medication: Medication) -> WriteResult:
        result = guarded_write(lambda: self.repository.save_medication(medication), medication.id, "save medication")
        if result.ok:
            self.reminders.on_create(medication)
        return result

    def update_medication(self, medication: Medication) -> WriteResult:
        previous = self.repository.get_medication(medication.id)
        if previous is None:
            logger.warning(f"Update for unknown medication {medication.id}")
            return WriteResult.failure(medication.id, "medication not found")
        result = guarded_write(
            lambda: self.repository.save_medication(medication), medication.id, "update medication"
        )
        if result.ok:
            self.reminders.on_update(medication, previous=previous)
        return result

    def delete_medication(self, medication: Medication) -> WriteResult:
        """Delete a medication and its dose records, then cancel its reminders."""
        result = guarded_write(
            lambda: self.repository.delete_medication(medication.id), medication.id, "delete medication"
        )
        if result.ok:
            self.reminders.on_delete(medication)
        return result

    def log_dose(
        self,
        medication: Medication,
        skipped: bool = False,
        notes: str | None = None,
        at: datetime | None = None,
    ) -> WriteResult:
        """Record that a dose was given (or skipped)."""
        record = MedicationDoseRecord(
            medication_id=medication.id,
            timestamp=at or datetime.now(),
            skipped=skipped,
            notes=notes,
        )
        return guarded_write(lambda: self.repository.save_dose_record(record), record.id, "save dose record")

    def adherence(self, medication: Medication, days: int = 7, now: datetime | None = None) -> AdherenceRate:
        return adherence_rate(medication, self.repository.query_dose_records(medication.id), days=days, now=now)

    def todays_doses(self, medication: Medication, now: datetime | None = None) -> list[MedicationDoseRecord]:
        return todays_doses(medication, self.repository.query_dose_records(medication.id), now=now)

    def dose_given_today(self, medication: Medication, now: datetime | None = None) -> bool:
        return dose_given_today(medication, self.repository.query_dose_records(medication.id), now=now)

    def active_medications(self, pet_id: str) -> list[Medication]:
        return [m for m in self.repository.query_medications(pet_id) if m.active]
