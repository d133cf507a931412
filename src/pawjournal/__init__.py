"""pawjournal: on-device health analytics and reminders for a pet health journal."""

from .engine import HealthEngine, TriageOutcome

__version__ = "0.1.0"

__all__ = ["HealthEngine", "TriageOutcome", "__version__"]
