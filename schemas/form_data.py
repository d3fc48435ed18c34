from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class FormDataSchema(BaseModel):
    """Client-held intake draft, camelCase on the wire. Null text fields read as empty."""

    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    postal_code: str = Field("", alias="postalCode")
    country: str = ""
    timezone: str = ""
    notes: Optional[str] = ""
    selected_services: list[str] = Field(default_factory=list, alias="selectedServices")
    service_documents: dict[str, list[Any]] = Field(default_factory=dict, alias="serviceDocuments")
    delivery_method: Optional[str] = Field(None, alias="deliveryMethod")
    signatories: list[Any] = Field(default_factory=list)
    is_signatory: bool = Field(False, alias="isSignatory")
    currency: str = "EUR"
    gclid: Optional[str] = None

    model_config = {"populate_by_name": True, "extra": "allow"}

    @field_validator(
        "first_name", "last_name", "email", "phone", "address", "city", "postal_code", "country", "timezone",
        mode="before",
    )
    @classmethod
    def _null_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("currency", mode="before")
    @classmethod
    def _default_currency(cls, v: Any) -> Any:
        return v or "EUR"

    @field_validator("selected_services", "service_documents", "signatories", mode="before")
    @classmethod
    def _null_to_empty_collection(cls, v: Any, info) -> Any:
        if v is not None:
            return v
        return {} if info.field_name == "service_documents" else []

    @field_validator("is_signatory", mode="before")
    @classmethod
    def _null_to_false(cls, v: Any) -> Any:
        return False if v is None else v

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
