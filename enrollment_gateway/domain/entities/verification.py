"""Payment verification state machine."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Optional
from uuid import UUID


class VerificationStatus(str, Enum):
    """States of one verification attempt."""

    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


REASON_DECLINED = "Payment was declined or failed"
REASON_MISSING_REFERENCE = "Payment reference not found"
REASON_REFERENCE_IN_USE = "Payment reference belongs to another enrollment"


@dataclass(frozen=True)
class GatewayCallback:
    """
    Parameters the payment gateway redirects back with.

    Only ``status == "failed"`` is treated as a decline. Any other
    value, or no value, is tentatively successful.
    """

    FAILED_STATUS: ClassVar[str] = "failed"

    reference: Optional[str]
    status: Optional[str] = None
    plan_id: Optional[str] = None
    plan_name: Optional[str] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    plan_discount: Optional[int] = None
    due_id: Optional[UUID] = None

    @property
    def has_reference(self) -> bool:
        return bool(self.reference and self.reference.strip())

    @property
    def is_declined(self) -> bool:
        return self.status == self.FAILED_STATUS


@dataclass
class PaymentVerification:
    """
    One in-flight verification attempt, keyed by gateway reference.

    idle -> processing -> {success, failed}. Terminal transitions are
    single-shot: once ``has_processed`` is set, later calls to
    ``succeed`` or ``fail`` leave the attempt untouched.
    """

    reference: Optional[str]
    status: VerificationStatus = VerificationStatus.IDLE
    has_processed: bool = False
    data: Optional[dict[str, Any]] = None
    error: str = ""
    incomplete_steps: list[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (VerificationStatus.SUCCESS, VerificationStatus.FAILED)

    def start(self) -> bool:
        """Enter processing. Returns False if the attempt already left idle."""
        if self.status != VerificationStatus.IDLE:
            return False
        self.status = VerificationStatus.PROCESSING
        self.started_at = datetime.utcnow()
        return True

    def succeed(self, payload: dict[str, Any], incomplete_steps: list[str] | None = None) -> bool:
        """Move to success. Returns False if a terminal state was already reached."""
        if self.has_processed:
            return False
        self.status = VerificationStatus.SUCCESS
        self.data = payload
        self.error = ""
        self.incomplete_steps = list(incomplete_steps or [])
        self.has_processed = True
        self.finished_at = datetime.utcnow()
        return True

    def fail(self, reason: str) -> bool:
        """Move to failed. Returns False if a terminal state was already reached."""
        if self.has_processed:
            return False
        self.status = VerificationStatus.FAILED
        self.data = None
        self.error = reason
        self.has_processed = True
        self.finished_at = datetime.utcnow()
        return True

    def to_dict(self) -> dict:
        return {
            "reference": self.reference,
            "status": self.status.value,
            "reason": self.error or None,
            "payment": self.data,
            "incomplete_steps": list(self.incomplete_steps),
        }


@dataclass(frozen=True)
class GatewayTransaction:
    """The gateway's own record of a transaction, fetched server-side."""

    reference: str
    status: str
    amount: Optional[int] = None
    currency: Optional[str] = None

    @property
    def is_successful(self) -> bool:
        return self.status == "success"
