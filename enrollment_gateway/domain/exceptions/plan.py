"""Plan catalog exceptions."""

from .base import ConflictException, ValidationException


class PlanNotFoundException(ValidationException):
    """Raised when a plan id is not in the catalog."""

    def __init__(self, plan_id: str):
        super().__init__(
            message=f"Plan not found: {plan_id}",
            code="PLAN_NOT_FOUND",
        )
        self.plan_id = plan_id


class CatalogIntegrityException(ValidationException):
    """Raised at load time when a catalog entry does not add up."""

    def __init__(self, plan_id: str, reason: str):
        super().__init__(
            message=f"Corrupt catalog entry {plan_id}: {reason}",
            code="CATALOG_CORRUPT",
        )
        self.plan_id = plan_id


class PlanChangeNotAllowedException(ConflictException):
    """Raised when switching plans while installments are outstanding."""

    def __init__(self, current_plan_id: str, requested_plan_id: str):
        super().__init__(
            message=(
                f"Cannot change plan from {current_plan_id} to {requested_plan_id} "
                "while installments are outstanding"
            ),
            code="PLAN_CHANGE_NOT_ALLOWED",
        )
        self.current_plan_id = current_plan_id
        self.requested_plan_id = requested_plan_id
