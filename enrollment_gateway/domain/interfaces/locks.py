"""Named lock interface for serialized critical sections."""

from abc import ABC, abstractmethod
from typing import AsyncContextManager


class CohortLock(ABC):
    """
    Serializes cohort assignment across concurrent confirmations.

    Everything written inside ``hold()`` must be committed before
    the context exits.
    """

    name = "cohort-assignment"

    @abstractmethod
    def hold(self) -> AsyncContextManager[None]:
        """Acquire the lock for the duration of the ``async with`` block."""
        ...
