"""Payment and verification Pydantic schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PaymentSchema(BaseModel):
    """Schema for a recorded payment."""

    model_config = ConfigDict(from_attributes=True)

    payment_id: str
    reference: str = Field(..., description="Gateway transaction reference")
    amount: int = Field(..., ge=0, description="Amount paid in kobo")
    currency: str
    plan_id: str | None = None
    plan_name: str | None = None
    installment_ordinal: int | None = Field(
        None,
        description="Installment settled; null for a single full payment",
    )
    paid_at: str


class PaymentListResponseSchema(BaseModel):
    """Schema for GET /v1/payments response."""

    payments: list[PaymentSchema]


class VerificationResponseSchema(BaseModel):
    """Schema for GET /v1/payments/verify response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "examples": [
                {
                    "reference": "T123456789",
                    "status": "success",
                    "reason": None,
                    "payment": {
                        "payment_id": "550e8400-e29b-41d4-a716-446655440000",
                        "reference": "T123456789",
                        "amount": 27_500_000,
                        "currency": "NGN",
                        "plan_id": "silver",
                        "installment_ordinal": 1,
                    },
                    "batch_name": "Batch 3",
                    "incomplete_steps": [],
                },
                {
                    "reference": "T987654321",
                    "status": "failed",
                    "reason": "Payment was declined or failed",
                    "payment": None,
                    "batch_name": None,
                    "incomplete_steps": [],
                },
            ]
        },
    )

    reference: str | None
    status: str = Field(..., description="success, failed or processing")
    reason: str | None = Field(None, description="Why verification failed")
    payment: dict[str, Any] | None = None
    batch_name: str | None = None
    incomplete_steps: list[str] = Field(
        default_factory=list,
        description="Post-payment steps that did not complete",
    )
