from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from schemas.form_data import FormDataSchema

SubmissionStatus = Literal["pending_payment", "pending", "confirmed", "in_progress", "completed", "cancelled"]


class SaveSubmissionRequest(BaseModel):
    form_data: Optional[FormDataSchema] = Field(None, alias="formData")
    current_step: Optional[int] = Field(None, alias="currentStep")
    completed_steps: list[int] = Field(default_factory=list, alias="completedSteps")
    total_amount: Optional[float] = Field(None, alias="totalAmount")
    session_id: Optional[str] = Field(None, alias="sessionId")
    client_id: Optional[str] = Field(None, alias="clientId")
    # Row version last seen by the caller; mismatch is rejected
    version: Optional[int] = None

    model_config = {"populate_by_name": True}


class SummaryViewedRequest(BaseModel):
    session_id: Optional[str] = Field(None, alias="sessionId")

    model_config = {"populate_by_name": True}


class ResumeRequest(BaseModel):
    form_data: Optional[dict[str, Any]] = Field(None, alias="formData")
    query: Optional[str] = None

    model_config = {"populate_by_name": True}


class PaymentCreate(BaseModel):
    """Completed payment as reported by the checkout flow."""

    provider_reference: Optional[str] = Field(None, alias="providerReference")
    payment_intent_id: Optional[str] = Field(None, alias="paymentIntentId")
    amount: float
    currency: str = "EUR"
    receipt_url: Optional[str] = Field(None, alias="receiptUrl")
    invoice_url: Optional[str] = Field(None, alias="invoiceUrl")

    model_config = {"populate_by_name": True}


class SubmissionAdminUpdate(BaseModel):
    status: Optional[SubmissionStatus] = None
    notes: Optional[str] = None

    model_config = {"populate_by_name": True}


class FunnelUpdate(BaseModel):
    funnel_status: str = Field(..., alias="funnelStatus")

    model_config = {"populate_by_name": True}
