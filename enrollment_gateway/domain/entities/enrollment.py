"""Enrollment entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4


@dataclass
class Enrollment:
    """
    A learner's enrollment.

    ``batch_name`` is assigned at most once, when the first payment
    is confirmed, and never recomputed afterwards.
    """

    user_id: str
    id: UUID = field(default_factory=uuid4)
    plan_id: Optional[str] = None
    is_payment_done: bool = False
    batch_name: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def has_cohort(self) -> bool:
        return self.batch_name is not None

    def to_dict(self) -> dict:
        return {
            "enrollment_id": str(self.id),
            "user_id": self.user_id,
            "plan_id": self.plan_id,
            "is_payment_done": self.is_payment_done,
            "batch_name": self.batch_name,
            "created_at": self.created_at.isoformat() + "Z",
            "updated_at": self.updated_at.isoformat() + "Z",
        }
