from fastapi import APIRouter
from .endpoints import health, crops, weather

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(crops.router, prefix="/crops", tags=["crops"])
api_router.include_router(weather.router, prefix="/weather", tags=["weather"])
