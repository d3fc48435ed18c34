import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import init_db
from api.catalog import admin_router as catalog_admin_router
from api.catalog import router as catalog_router
from api.form import router as form_router
from api.pricing import router as pricing_router
from api.submissions import admin_router as submissions_admin_router
from api.submissions import router as submissions_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(
    title=settings.app_name,
    description="Notary intake form, client dashboard and back-office API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(submissions_router)
app.include_router(submissions_admin_router)
app.include_router(form_router)
app.include_router(catalog_router)
app.include_router(catalog_admin_router)
app.include_router(pricing_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
