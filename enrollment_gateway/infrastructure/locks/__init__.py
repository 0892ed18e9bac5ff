"""Lock implementations."""

from .cohort_lock import AdvisoryCohortLock, advisory_key

__all__ = [
    "AdvisoryCohortLock",
    "advisory_key",
]
