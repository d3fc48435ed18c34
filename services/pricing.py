"""
Price an intake draft against the service catalogue.

Each uploaded document of a selected service is billed at the service price,
plus the price of every option chosen on that document. Postal delivery adds
a flat surcharge. Prices come from the currency-specific catalogue column when
one is set for the target currency, otherwise from the EUR price converted
with fixed fallback rates.
"""
from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from models import Service, ServiceOption

FALLBACK_RATES: dict[str, float] = {
    "USD": 1.1,
    "GBP": 0.85,
    "CAD": 1.5,
    "AUD": 1.65,
    "CHF": 0.95,
    "JPY": 165,
    "CNY": 7.8,
}

SYMBOLS: dict[str, str] = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "CAD": "C$",
    "AUD": "A$",
    "CHF": "CHF ",
    "JPY": "¥",
    "CNY": "¥",
}


def convert_price(eur_amount: float, target_currency: str) -> float:
    if not eur_amount or not target_currency or target_currency == "EUR":
        return eur_amount
    rate = FALLBACK_RATES.get(target_currency, 1)
    return round(eur_amount * rate, 2)


def format_price(amount: float, currency: str) -> str:
    symbol = SYMBOLS.get(currency, currency)
    if currency in ("JPY", "CNY"):
        return f"{symbol}{round(amount)}"
    return f"{symbol}{amount:.2f}"


def _own_price(record: Any, currency: str) -> Optional[float]:
    """Catalogue price already expressed in `currency`, if the record has one."""
    if currency == "USD" and record.price_usd is not None:
        return record.price_usd
    if currency == "GBP" and record.price_gbp is not None:
        return record.price_gbp
    return None


def service_price(service: Optional[Service], currency: str) -> float:
    if service is None:
        return 0
    own = _own_price(service, currency)
    if own is not None:
        return own
    return convert_price(service.base_price or 0, currency)


def option_price(option: Optional[ServiceOption], currency: str) -> float:
    if option is None:
        return 0
    own = _own_price(option, currency)
    if own is not None:
        return own
    return convert_price(option.additional_price or 0, currency)


def postal_delivery_price(currency: str) -> float:
    return convert_price(settings.delivery_postal_price_eur, currency)


def calculate_total_amount(
    form_data: dict[str, Any],
    services: dict[str, Service],
    options: dict[str, ServiceOption],
    currency: str,
) -> float:
    """Total for a camelCase draft; unknown services and options cost nothing."""
    total = 0.0
    documents = form_data.get("serviceDocuments") or {}
    for service_id in form_data.get("selectedServices") or []:
        service = services.get(service_id)
        if service is None:
            continue
        docs = documents.get(service_id) or []
        total += len(docs) * service_price(service, currency)
        for doc in docs:
            if not isinstance(doc, dict):
                continue
            for option_id in doc.get("selectedOptions") or []:
                total += option_price(options.get(option_id), currency)
    if form_data.get("deliveryMethod") == "postal":
        total += postal_delivery_price(currency)
    return round(total, 2)


async def load_catalog(session: AsyncSession) -> tuple[dict[str, Service], dict[str, ServiceOption]]:
    """Active services and options keyed by their catalogue id."""
    services_result = await session.execute(select(Service).where(Service.is_active.is_(True)))
    options_result = await session.execute(select(ServiceOption).where(ServiceOption.is_active.is_(True)))
    services = {s.service_id: s for s in services_result.scalars().all()}
    options = {o.option_id: o for o in options_result.scalars().all()}
    return services, options
