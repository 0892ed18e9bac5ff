"""Plan-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class PlanSchema(BaseModel):
    """Schema for a catalog plan."""

    model_config = ConfigDict(from_attributes=True)

    plan_id: str = Field(..., description="Catalog plan id", examples=["bronze"])
    name: str = Field(..., description="Display name", examples=["Bronze Plan"])
    total_amount: int = Field(
        ...,
        gt=0,
        description="Total tuition in kobo",
        examples=[60_000_000],
    )
    installment_count: int = Field(..., ge=1, examples=[4])
    first_installment_amount: int = Field(..., gt=0, examples=[15_000_000])
    subsequent_installment_amount: int = Field(..., ge=0, examples=[15_000_000])
    interval_months: int = Field(..., ge=0, examples=[3])
    currency: str = Field("NGN", description="ISO 4217 currency code")
    discount_percent: int = Field(0, ge=0, le=100, examples=[40])


class PlanListResponseSchema(BaseModel):
    """Schema for GET /v1/plans response."""

    plans: list[PlanSchema]


class InstallmentSchema(BaseModel):
    """Schema for an installment in a schedule preview."""

    model_config = ConfigDict(from_attributes=True)

    installment_number: int = Field(..., ge=1, description="1-indexed installment number")
    amount: int = Field(..., gt=0, description="Installment amount in kobo")
    due_date: str = Field(
        ...,
        description="Due date in ISO 8601 format (YYYY-MM-DD)",
        examples=["2024-04-10"],
    )
    description: str = Field("", examples=["Installment 2 of 4"])


class ScheduleResponseSchema(BaseModel):
    """Schema for GET /v1/plans/{plan_id}/schedule response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "examples": [
                {
                    "plan_id": "bronze",
                    "start_date": "2024-01-10",
                    "total_amount": 60_000_000,
                    "installments": [
                        {
                            "installment_number": 1,
                            "amount": 15_000_000,
                            "due_date": "2024-01-10",
                            "description": "Initial payment for Bronze Plan",
                        },
                        {
                            "installment_number": 2,
                            "amount": 15_000_000,
                            "due_date": "2024-04-10",
                            "description": "Installment 2 of 4",
                        },
                    ],
                }
            ]
        },
    )

    plan_id: str
    start_date: str
    total_amount: int
    installments: list[InstallmentSchema]
