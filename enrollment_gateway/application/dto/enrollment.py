"""Data transfer objects for enrollment and cohort operations."""

from dataclasses import dataclass
from typing import List, Optional

from enrollment_gateway.service.cohort import parse_batch_number

from .ledger import PaymentDueResponse


@dataclass(frozen=True)
class EnrollmentResponse:
    """Response data for a learner's enrollment."""

    enrollment_id: str
    user_id: str
    plan_id: Optional[str]
    is_payment_done: bool
    batch_name: Optional[str]
    batch_number: Optional[int]
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, enrollment) -> "EnrollmentResponse":
        return cls(
            enrollment_id=str(enrollment.id),
            user_id=enrollment.user_id,
            plan_id=enrollment.plan_id,
            is_payment_done=enrollment.is_payment_done,
            batch_name=enrollment.batch_name,
            batch_number=(
                parse_batch_number(enrollment.batch_name) if enrollment.batch_name else None
            ),
            created_at=enrollment.created_at.isoformat() + "Z",
            updated_at=enrollment.updated_at.isoformat() + "Z",
        )


@dataclass(frozen=True)
class PlanSelectionResponse:
    """Enrollment after a plan was selected, with the dues it scheduled."""

    enrollment: EnrollmentResponse
    dues: List[PaymentDueResponse]


@dataclass(frozen=True)
class CohortResponse:
    """The cohort the next paid learner would join."""

    batch_name: str
    batch_number: int
    enrollee_count_in_batch: int
    slots_remaining: int
    capacity: int

    @classmethod
    def from_entity(cls, assignment) -> "CohortResponse":
        return cls(
            batch_name=assignment.batch_name,
            batch_number=assignment.batch_number,
            enrollee_count_in_batch=assignment.enrollee_count_in_batch,
            slots_remaining=assignment.slots_remaining,
            capacity=assignment.capacity,
        )
