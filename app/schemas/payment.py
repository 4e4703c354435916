from typing import Dict, Optional
from pydantic import BaseModel, Field, model_validator
from uuid import UUID
from decimal import Decimal


class PayerDetails(BaseModel):
    """Customer details collected before opening the checkout widget."""
    name: str = ""
    email: str = ""
    contact: str = ""


class CheckoutSession(BaseModel):
    """Options the frontend passes straight to the checkout widget."""
    bill_id: UUID
    key_id: str
    order_id: str
    amount: Decimal
    amount_subunits: int = Field(..., description="Amount in the currency's smallest unit (paise for INR)")
    currency: str
    name: str
    description: str
    prefill: Dict[str, str]
    notes: Dict[str, str]


class PaymentOutcome(BaseModel):
    """
    Result reported by the checkout widget.

    On success the gateway identifiers and signature are required; on
    failure only a human-readable reason is carried.
    """
    success: bool
    order_id: Optional[str] = None
    payment_id: Optional[str] = None
    signature: Optional[str] = None
    failure_reason: Optional[str] = None

    @model_validator(mode="after")
    def check_success_fields(self) -> "PaymentOutcome":
        if self.success and not (self.order_id and self.payment_id and self.signature):
            raise ValueError("order_id, payment_id and signature are required for a successful payment")
        return self
