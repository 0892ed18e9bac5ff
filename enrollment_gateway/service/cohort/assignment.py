"""
Cohort Assignment for the Enrollment Gateway.

Learners who complete a payment are grouped into fixed-capacity
batches in payment order. Batch numbers are 1-indexed and derived
purely from how many learners have already paid: with capacity C,
the k-th paid learner (0-indexed) lands in batch ``k // C + 1``.
"""

import re
from typing import Optional

from enrollment_gateway.domain.entities import CohortAssignment
from enrollment_gateway.domain.exceptions import InvalidCapacityException

BATCH_NAME_TEMPLATE = "Batch {number}"
_BATCH_NAME_PATTERN = re.compile(r"^Batch ([1-9][0-9]*)$")


def batch_name(batch_number: int) -> str:
    """Render the display name of a 1-indexed batch."""
    return BATCH_NAME_TEMPLATE.format(number=batch_number)


def parse_batch_number(name: str) -> Optional[int]:
    """Return the batch number encoded in a batch name, or None if malformed."""
    match = _BATCH_NAME_PATTERN.match(name or "")
    if match is None:
        return None
    return int(match.group(1))


def validate_capacity(capacity: int) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
        raise InvalidCapacityException(capacity)
    return capacity


def compute_next_cohort(paid_count: int, capacity: int) -> CohortAssignment:
    """
    Derive the batch the next paid learner joins.

    Args:
        paid_count: Learners who have already paid
        capacity: Maximum learners per batch

    Returns:
        CohortAssignment for the next learner

    Raises:
        InvalidCapacityException: If capacity is not a positive integer
    """
    validate_capacity(capacity)
    paid_count = max(paid_count, 0)

    batch_number = paid_count // capacity + 1
    enrollee_count = paid_count % capacity

    return CohortAssignment(
        batch_name=batch_name(batch_number),
        batch_number=batch_number,
        enrollee_count_in_batch=enrollee_count,
        slots_remaining=capacity - enrollee_count,
        capacity=capacity,
    )
