from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models import Service, ServiceOption
from schemas.catalog import OptionCreate, OptionUpdate, ServiceCreate, ServiceUpdate

router = APIRouter(prefix="/api/services", tags=["catalog"])
admin_router = APIRouter(prefix="/api/admin", tags=["admin"])

MSG_SERVICE_NOT_FOUND = "Service not found"
MSG_OPTION_NOT_FOUND = "Option not found"


def _service_to_response(s: Service) -> dict[str, Any]:
    return {
        "serviceId": s.service_id,
        "name": s.name,
        "description": s.description,
        "basePrice": s.base_price,
        "priceUsd": s.price_usd,
        "priceGbp": s.price_gbp,
        "isActive": s.is_active,
        "createdAt": s.created_at.isoformat() if s.created_at else None,
        "updatedAt": s.updated_at.isoformat() if s.updated_at else None,
    }


def _option_to_response(o: ServiceOption) -> dict[str, Any]:
    return {
        "optionId": o.option_id,
        "name": o.name,
        "description": o.description,
        "additionalPrice": o.additional_price,
        "priceUsd": o.price_usd,
        "priceGbp": o.price_gbp,
        "isActive": o.is_active,
        "createdAt": o.created_at.isoformat() if o.created_at else None,
        "updatedAt": o.updated_at.isoformat() if o.updated_at else None,
    }


async def _get_service(db: AsyncSession, service_id: str) -> Service:
    result = await db.execute(select(Service).where(Service.service_id == service_id))
    service = result.scalar_one_or_none()
    if not service:
        raise HTTPException(status_code=404, detail=MSG_SERVICE_NOT_FOUND)
    return service


async def _get_option(db: AsyncSession, option_id: str) -> ServiceOption:
    result = await db.execute(select(ServiceOption).where(ServiceOption.option_id == option_id))
    option = result.scalar_one_or_none()
    if not option:
        raise HTTPException(status_code=404, detail=MSG_OPTION_NOT_FOUND)
    return option


@router.get("", response_model=list[dict])
async def list_active_services(db: AsyncSession = Depends(get_db)):
    """Services offered on the public intake form."""
    result = await db.execute(select(Service).where(Service.is_active.is_(True)).order_by(Service.name))
    return [_service_to_response(s) for s in result.scalars().all()]


@admin_router.get("/services", response_model=list[dict])
async def list_services(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Service).order_by(Service.name))
    return [_service_to_response(s) for s in result.scalars().all()]


@admin_router.get("/services/{service_id}", response_model=dict)
async def get_service(service_id: str, db: AsyncSession = Depends(get_db)):
    return _service_to_response(await _get_service(db, service_id))


@admin_router.post("/services", response_model=dict, status_code=201)
async def create_service(body: ServiceCreate, db: AsyncSession = Depends(get_db)):
    existing = await db.execute(select(Service).where(Service.service_id == body.service_id))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Service id already in use")
    service = Service(**body.model_dump(by_alias=False))
    db.add(service)
    await db.flush()
    await db.refresh(service)
    return _service_to_response(service)


@admin_router.patch("/services/{service_id}", response_model=dict)
async def update_service(service_id: str, body: ServiceUpdate, db: AsyncSession = Depends(get_db)):
    service = await _get_service(db, service_id)
    for field, value in body.model_dump(by_alias=False, exclude_unset=True).items():
        if value is not None or field in ("price_usd", "price_gbp", "description"):
            setattr(service, field, value)
    await db.flush()
    await db.refresh(service)
    return _service_to_response(service)


@admin_router.delete("/services/{service_id}", status_code=204)
async def delete_service(service_id: str, db: AsyncSession = Depends(get_db)):
    service = await _get_service(db, service_id)
    await db.delete(service)
    await db.flush()
    return None


@admin_router.get("/options", response_model=list[dict])
async def list_options(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(ServiceOption).order_by(ServiceOption.name))
    return [_option_to_response(o) for o in result.scalars().all()]


@admin_router.get("/options/{option_id}", response_model=dict)
async def get_option(option_id: str, db: AsyncSession = Depends(get_db)):
    return _option_to_response(await _get_option(db, option_id))


@admin_router.post("/options", response_model=dict, status_code=201)
async def create_option(body: OptionCreate, db: AsyncSession = Depends(get_db)):
    existing = await db.execute(select(ServiceOption).where(ServiceOption.option_id == body.option_id))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Option id already in use")
    option = ServiceOption(**body.model_dump(by_alias=False))
    db.add(option)
    await db.flush()
    await db.refresh(option)
    return _option_to_response(option)


@admin_router.patch("/options/{option_id}", response_model=dict)
async def update_option(option_id: str, body: OptionUpdate, db: AsyncSession = Depends(get_db)):
    option = await _get_option(db, option_id)
    for field, value in body.model_dump(by_alias=False, exclude_unset=True).items():
        if value is not None or field in ("price_usd", "price_gbp", "description"):
            setattr(option, field, value)
    await db.flush()
    await db.refresh(option)
    return _option_to_response(option)


@admin_router.delete("/options/{option_id}", status_code=204)
async def delete_option(option_id: str, db: AsyncSession = Depends(get_db)):
    option = await _get_option(db, option_id)
    await db.delete(option)
    await db.flush()
    return None
