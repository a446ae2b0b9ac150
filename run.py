# run.py
"""
Main entry point for the Campo360 agronomy backend
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv

from agents.base import agent_registry
from agents.crops.agent import CropLifecycleAgent
from agents.weather.agent import WeatherAdvisoryAgent
from api.app import create_app
from core.config import get_settings, validate_api_keys
from core.logging import setup_logging

# Load environment variables first
load_dotenv()

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


def register_agents() -> None:
    """Initialize and register all agents"""
    crops_agent = CropLifecycleAgent()
    agent_registry.register(crops_agent)
    logger.info("Crop lifecycle agent registered")

    weather_agent = WeatherAdvisoryAgent()
    agent_registry.register(weather_agent)
    logger.info("Weather advisory agent registered")


@asynccontextmanager
async def lifespan(app):
    """Application lifespan management"""

    # Startup
    logger.info("Starting Campo360 agronomy backend")
    validate_api_keys(get_settings())

    logger.info("Initializing agents...")
    try:
        register_agents()

        health_results = await agent_registry.health_check_all()
        for agent_name, health in health_results.items():
            logger.info(f"{agent_name}: {health['status']}")

        logger.info("All agents initialized successfully")

    except Exception as e:
        logger.error(f"Failed to initialize agents: {e}")
        raise

    yield

    # Shutdown
    logger.info("Shutting down Campo360 agronomy backend")


def create_application():
    """Create FastAPI application with all configurations"""
    return create_app(lifespan=lifespan)


def main():
    """Main entry point"""
    settings = get_settings()

    logger.info(f"Starting server on {settings.api_host}:{settings.api_port}")
    logger.info(f"Environment: {settings.environment.value}")
    logger.info(f"Debug mode: {settings.debug}")

    if settings.debug:
        # Import string so reload can re-create the app
        uvicorn.run(
            "run:create_application",
            factory=True,
            host=settings.api_host,
            port=settings.api_port,
            reload=True,
            log_level=settings.log_level.value.lower(),
            access_log=True
        )
    else:
        app = create_application()
        uvicorn.run(
            app,
            host=settings.api_host,
            port=settings.api_port,
            reload=False,
            log_level=settings.log_level.value.lower(),
            access_log=True
        )


if __name__ == "__main__":
    main()
