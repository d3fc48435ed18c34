from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from schemas.catalog import QuoteRequest
from services.pricing import calculate_total_amount, format_price, load_catalog
from utils.case import form_keys_to_camel

router = APIRouter(prefix="/api/pricing", tags=["pricing"])


@router.post("/quote", response_model=dict)
async def quote(body: QuoteRequest, db: AsyncSession = Depends(get_db)):
    """Total for a draft, in the requested currency or the draft's own."""
    form_data = form_keys_to_camel(body.form_data)
    currency = (body.currency or form_data.get("currency") or settings.default_currency).upper()
    services, options = await load_catalog(db)
    total = calculate_total_amount(form_data, services, options, currency)
    return {"currency": currency, "total": total, "formatted": format_price(total, currency)}
