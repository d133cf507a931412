"""Shared test fixtures for pawjournal."""

import os
import tempfile
from datetime import datetime, time

import pytest

from pawjournal.core.config import reset_config
from pawjournal.events.models import EventCategory, HealthEvent, Medication, MedicationFrequency

NOW = datetime(2026, 3, 15, 12, 0)
PET_ID = "pet-1"


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "paths": {"data_dir": os.path.join(tmp_dir, "data")},
        "analytics": {"activity_change_pct": 25},
        "score": {"weights": {"activity": 2.0}},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture(autouse=True)
def _reset_config():
    yield
    reset_config()


@pytest.fixture
def make_event():
    """Factory for HealthEvents; category may be given as a string label."""

    def _make(category, timestamp=NOW, pet_id=PET_ID, **fields):
        if not isinstance(category, EventCategory):
            category = EventCategory.from_label(category)
        return HealthEvent(pet_id=pet_id, category=category, timestamp=timestamp, **fields)

    return _make


@pytest.fixture
def make_medication():
    def _make(frequency=MedicationFrequency.DAILY, times=((8, 0),), **fields):
        fields.setdefault("pet_id", PET_ID)
        fields.setdefault("name", "Carprofen")
        fields.setdefault("dosage", "25mg")
        return Medication(
            frequency=frequency,
            scheduled_times=[time(h, m) for h, m in times],
            **fields,
        )

    return _make
