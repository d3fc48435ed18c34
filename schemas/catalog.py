from typing import Optional

from pydantic import BaseModel, Field


class ServiceCreate(BaseModel):
    service_id: str = Field(..., alias="serviceId")
    name: str
    description: Optional[str] = None
    base_price: float = Field(0, alias="basePrice", ge=0)
    price_usd: Optional[float] = Field(None, alias="priceUsd", ge=0)
    price_gbp: Optional[float] = Field(None, alias="priceGbp", ge=0)
    is_active: bool = Field(True, alias="isActive")

    model_config = {"populate_by_name": True}


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    base_price: Optional[float] = Field(None, alias="basePrice", ge=0)
    price_usd: Optional[float] = Field(None, alias="priceUsd", ge=0)
    price_gbp: Optional[float] = Field(None, alias="priceGbp", ge=0)
    is_active: Optional[bool] = Field(None, alias="isActive")

    model_config = {"populate_by_name": True}


class OptionCreate(BaseModel):
    option_id: str = Field(..., alias="optionId")
    name: str
    description: Optional[str] = None
    additional_price: float = Field(0, alias="additionalPrice", ge=0)
    price_usd: Optional[float] = Field(None, alias="priceUsd", ge=0)
    price_gbp: Optional[float] = Field(None, alias="priceGbp", ge=0)
    is_active: bool = Field(True, alias="isActive")

    model_config = {"populate_by_name": True}


class OptionUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    additional_price: Optional[float] = Field(None, alias="additionalPrice", ge=0)
    price_usd: Optional[float] = Field(None, alias="priceUsd", ge=0)
    price_gbp: Optional[float] = Field(None, alias="priceGbp", ge=0)
    is_active: Optional[bool] = Field(None, alias="isActive")

    model_config = {"populate_by_name": True}


class QuoteRequest(BaseModel):
    """Price a draft against the catalogue."""
    form_data: dict = Field(default_factory=dict, alias="formData")
    currency: Optional[str] = None

    model_config = {"populate_by_name": True}
