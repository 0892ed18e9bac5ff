"""Cohort (batch) assignment value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CohortAssignment:
    """
    The cohort the next paid learner joins.

    Batches are not stored entities: this is derived from the count
    of paid enrollments at assignment time.
    """

    batch_name: str
    batch_number: int
    enrollee_count_in_batch: int
    slots_remaining: int
    capacity: int

    def to_dict(self) -> dict:
        return {
            "batch_name": self.batch_name,
            "batch_number": self.batch_number,
            "enrollee_count_in_batch": self.enrollee_count_in_batch,
            "slots_remaining": self.slots_remaining,
            "capacity": self.capacity,
        }
