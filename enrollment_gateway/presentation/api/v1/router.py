from fastapi import APIRouter

from .cohorts import cohort_router
from .enrollments import enrollment_router
from .health import health_router
from .payment_dues import payment_due_router
from .payments import payment_router
from .plans import plan_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(plan_router, tags=["Plans"])
router.include_router(enrollment_router, tags=["Enrollments"])
router.include_router(payment_due_router, tags=["Payment Dues"])
router.include_router(payment_router, tags=["Payments"])
router.include_router(cohort_router, tags=["Cohorts"])
