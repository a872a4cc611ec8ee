from fastapi import APIRouter

from app.api.airports import router as airports_router
from app.api.pricing import router as pricing_router
from app.api.public.health import router as health_router


api_router = APIRouter()
api_router.include_router(health_router)

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(airports_router)
v1_router.include_router(pricing_router)

api_router.include_router(v1_router)
