"""
Plan Catalog.

Immutable lookup table of tuition plans. Every entry is checked when
the catalog is built, so a corrupt table stops the process at start-up
instead of surfacing as a wrong schedule later.
"""

from functools import lru_cache
from typing import Dict, Iterable, List

from enrollment_gateway.domain.entities import Plan
from enrollment_gateway.domain.exceptions import (
    CatalogIntegrityException,
    PlanNotFoundException,
)

from .settings import CatalogSettings, get_catalog_settings


def validate_plan(plan: Plan) -> None:
    """
    Check a single catalog entry.

    Raises:
        CatalogIntegrityException: If the entry is inconsistent
    """
    if plan.installment_count < 1:
        raise CatalogIntegrityException(plan.id, "installment_count must be at least 1")

    if plan.first_installment_amount <= 0:
        raise CatalogIntegrityException(plan.id, "first_installment_amount must be positive")

    if plan.has_installments:
        if plan.subsequent_installment_amount <= 0:
            raise CatalogIntegrityException(
                plan.id, "subsequent_installment_amount must be positive"
            )
        if plan.interval_months < 1:
            raise CatalogIntegrityException(plan.id, "interval_months must be at least 1")

    if plan.scheduled_total != plan.total_amount:
        raise CatalogIntegrityException(
            plan.id,
            f"installments sum to {plan.scheduled_total}, total_amount is {plan.total_amount}",
        )


class PlanCatalog:
    """Read-only registry of plans keyed by lower-case id."""

    def __init__(self, plans: Iterable[Plan]):
        self._plans: Dict[str, Plan] = {}
        for plan in plans:
            validate_plan(plan)
            key = plan.id.lower()
            if key in self._plans:
                raise CatalogIntegrityException(plan.id, "duplicate plan id")
            self._plans[key] = plan

    def get(self, plan_id: str | None) -> Plan:
        """
        Look up a plan.

        Raises:
            PlanNotFoundException: If the id is unknown or empty
        """
        if not plan_id:
            raise PlanNotFoundException(str(plan_id))
        plan = self._plans.get(plan_id.strip().lower())
        if plan is None:
            raise PlanNotFoundException(plan_id)
        return plan

    def all(self) -> List[Plan]:
        return list(self._plans.values())

    def __contains__(self, plan_id: object) -> bool:
        return isinstance(plan_id, str) and plan_id.strip().lower() in self._plans

    def __len__(self) -> int:
        return len(self._plans)


def load_catalog(settings: CatalogSettings | None = None) -> PlanCatalog:
    """Build a catalog from settings, failing fast on corrupt entries."""
    return PlanCatalog((settings or get_catalog_settings()).plans)


@lru_cache
def get_plan_catalog() -> PlanCatalog:
    """Get the process-wide catalog."""
    return load_catalog()
