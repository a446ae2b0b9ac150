from fastapi import APIRouter
from datetime import datetime

from agents.base import agent_registry
from core.config import get_settings

router = APIRouter()

@router.get("/")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "service": get_settings().api_title,
        "agents": agent_registry.list_agents()
    }

@router.get("/agents")
async def agents_health():
    """Health of every registered agent"""
    return await agent_registry.health_check_all()
