"""Bounded in-process registry of verification attempts."""

from collections import OrderedDict
from typing import Tuple

from enrollment_gateway.core.config import settings
from enrollment_gateway.domain.entities import PaymentVerification

AttemptKey = Tuple[str, str]


class VerificationRegistry:
    """
    Remembers recent verification attempts by caller and gateway reference.

    A repeated callback from the same caller gets the existing attempt
    back instead of re-running the success path. Another caller quoting
    the same reference starts its own attempt, so it never sees someone
    else's payment. This is a debounce only: entries are evicted
    oldest-first and lost on restart, and the unique payment reference
    remains the real guarantee.
    """

    def __init__(self, max_size: int | None = None):
        self._max_size = max_size or settings.verification_registry_size
        self._attempts: "OrderedDict[AttemptKey, PaymentVerification]" = OrderedDict()

    def get_or_create(self, user_id: str, reference: str) -> PaymentVerification:
        key = (user_id, reference)
        attempt = self._attempts.get(key)
        if attempt is not None:
            self._attempts.move_to_end(key)
            return attempt

        attempt = PaymentVerification(reference=reference)
        self._attempts[key] = attempt
        while len(self._attempts) > self._max_size:
            self._attempts.popitem(last=False)
        return attempt

    def discard(self, user_id: str, reference: str) -> None:
        """Forget an attempt so a retry starts from idle."""
        self._attempts.pop((user_id, reference), None)

    def __contains__(self, key: object) -> bool:
        return key in self._attempts

    def __len__(self) -> int:
        return len(self._attempts)
