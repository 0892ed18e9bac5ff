"""Enrollment and cohort Pydantic schemas."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from .ledger import PaymentDueSchema


class EnrollmentResponseSchema(BaseModel):
    """Schema for a learner's enrollment."""

    model_config = ConfigDict(from_attributes=True)

    enrollment_id: str = Field(..., description="UUID of the enrollment")
    user_id: str
    plan_id: str | None = Field(None, description="Selected plan, if any")
    is_payment_done: bool
    batch_name: str | None = Field(None, examples=["Batch 1"])
    batch_number: int | None = Field(None, description="Number of the assigned batch", examples=[1])
    created_at: str
    updated_at: str


class SelectPlanRequestSchema(BaseModel):
    """Schema for PUT /v1/enrollments/me/plan request body."""

    plan_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Catalog plan id",
        examples=["silver"],
    )
    start_date: date | None = Field(
        None,
        description="Due date of installment 1; defaults to today",
    )


class PlanSelectionResponseSchema(BaseModel):
    """Schema for PUT /v1/enrollments/me/plan response."""

    model_config = ConfigDict(from_attributes=True)

    enrollment: EnrollmentResponseSchema
    dues: list[PaymentDueSchema]


class CohortResponseSchema(BaseModel):
    """Schema for GET /v1/cohorts/next response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "examples": [
                {
                    "batch_name": "Batch 1",
                    "batch_number": 1,
                    "enrollee_count_in_batch": 19,
                    "slots_remaining": 1,
                    "capacity": 20,
                }
            ]
        },
    )

    batch_name: str
    batch_number: int = Field(..., ge=1)
    enrollee_count_in_batch: int = Field(..., ge=0)
    slots_remaining: int = Field(..., ge=1)
    capacity: int = Field(..., ge=1)
