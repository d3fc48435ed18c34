"""
Seed the notary service catalogue and per-document options.
Run: python -m scripts.seed_services (from the project root, with DB configured).
"""
import asyncio
import os
import sys

# Add parent so we can import from the project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database import AsyncSessionLocal, init_db
from models import Service, ServiceOption


SERVICES_DATA = [
    {
        "service_id": "certified-copy",
        "name": "Certified true copy",
        "description": "Notarial certification that a copy matches its original",
        "base_price": 39.0,
        "price_usd": 45.0,
        "price_gbp": 35.0,
    },
    {
        "service_id": "signature-notarization",
        "name": "Signature notarization",
        "description": "Remote notarization of one signed document",
        "base_price": 59.0,
        "price_usd": 65.0,
        "price_gbp": None,
    },
    {
        "service_id": "power-of-attorney",
        "name": "Power of attorney",
        "description": "Drafting review and notarization of a power of attorney",
        "base_price": 89.0,
        "price_usd": None,
        "price_gbp": 79.0,
    },
    {
        "service_id": "apostille",
        "name": "Apostille",
        "description": "Apostille for use of a notarized document abroad",
        "base_price": 79.0,
        "price_usd": 89.0,
        "price_gbp": 69.0,
    },
]

OPTIONS_DATA = [
    {
        "option_id": "translation",
        "name": "Certified translation",
        "description": "Sworn translation of the document",
        "additional_price": 49.0,
        "price_usd": 55.0,
        "price_gbp": None,
    },
    {
        "option_id": "express",
        "name": "Express processing",
        "description": "Handled within 24 hours",
        "additional_price": 25.0,
        "price_usd": None,
        "price_gbp": None,
    },
]


async def _seed_services(session: AsyncSession) -> None:
    for data in SERVICES_DATA:
        existing = await session.execute(select(Service).where(Service.service_id == data["service_id"]))
        if existing.scalar_one_or_none():
            print(f"Service {data['service_id']} already exists, skipping")
            continue
        session.add(Service(**data))
        print(f"Seeded service: {data['name']}")


async def _seed_options(session: AsyncSession) -> None:
    for data in OPTIONS_DATA:
        existing = await session.execute(select(ServiceOption).where(ServiceOption.option_id == data["option_id"]))
        if existing.scalar_one_or_none():
            print(f"Option {data['option_id']} already exists, skipping")
            continue
        session.add(ServiceOption(**data))
        print(f"Seeded option: {data['name']}")


async def seed():
    await init_db()
    async with AsyncSessionLocal() as session:
        await _seed_services(session)
        await _seed_options(session)
        await session.commit()
    print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
