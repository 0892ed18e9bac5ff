"""Payment-due Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class PaymentDueSchema(BaseModel):
    """Schema for a scheduled installment."""

    model_config = ConfigDict(from_attributes=True)

    due_id: str = Field(..., description="UUID of the payment due")
    plan_id: str
    installment_number: int = Field(..., ge=1)
    total_installments: int = Field(..., ge=1)
    due_amount: int = Field(..., gt=0, description="Amount due in kobo")
    due_date: str = Field(..., examples=["2024-04-10"])
    status: str = Field(
        ...,
        description="pending, paid, overdue or cancelled",
        examples=["pending"],
    )
    paid_amount: int = 0
    paid_date: str | None = None
    payment_reference: str | None = None
    notes: str = ""
    is_payable: bool = Field(..., description="Whether the payment window is open")
    days_until_open: int = Field(
        0,
        ge=0,
        description="Days until the payment window opens (0 when open)",
    )


class PaymentDueListResponseSchema(BaseModel):
    """Schema for GET /v1/payment-dues responses."""

    enrollment_id: str
    dues: list[PaymentDueSchema]
