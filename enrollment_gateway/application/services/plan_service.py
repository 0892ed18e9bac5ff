"""Plan service - catalog browsing and schedule previews."""

from datetime import date
from typing import List, Optional

import structlog

from enrollment_gateway.application.dto import PlanResponse, ScheduleResponse
from enrollment_gateway.service.catalog import PlanCatalog
from enrollment_gateway.service.scheduling import schedule

logger = structlog.get_logger(__name__)


class PlanService:
    """
    Application service for tuition plan use cases.

    Handles catalog listing and installment schedule previews.
    """

    def __init__(self, catalog: PlanCatalog):
        self._catalog = catalog

    def list_plans(self) -> List[PlanResponse]:
        """All catalog plans in table order."""
        return [PlanResponse.from_entity(plan) for plan in self._catalog.all()]

    def get_schedule(self, plan_id: str, start_date: Optional[date] = None) -> ScheduleResponse:
        """
        Preview a plan's installment schedule.

        Args:
            plan_id: Catalog plan id
            start_date: Due date of installment 1 (defaults to today)

        Returns:
            ScheduleResponse with every installment

        Raises:
            PlanNotFoundException: If the plan id is unknown
        """
        plan = self._catalog.get(plan_id)
        start_date = start_date or date.today()
        installments = schedule(plan, start_date)

        logger.info(
            "schedule_previewed",
            plan_id=plan.id,
            start_date=start_date.isoformat(),
            num_installments=len(installments),
        )

        return ScheduleResponse.from_schedule(plan, start_date, installments)
