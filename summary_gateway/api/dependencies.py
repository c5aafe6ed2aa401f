# summary_gateway/api/dependencies.py
import logging
from fastapi import FastAPI, Request

from summary_gateway.config.settings import Settings
from summary_gateway.core.summary_tool import SummaryTool

logger = logging.getLogger(__name__)

def get_summary_tool(request: Request) -> SummaryTool:
    """Summary tool built once by the app factory"""
    return request.app.state.summary_tool

async def startup_handler(app: FastAPI):
    """Application startup handler"""
    settings: Settings = app.state.settings
    logger.info(f"App listening on port {settings.PORT}")

async def shutdown_handler(app: FastAPI):
    """Application shutdown handler"""
    try:
        logger.info("Shutting down application...")
        await app.state.summary_tool.close()
        logger.info("Application shutdown completed")
    except Exception as e:
        logger.error(f"Shutdown error: {e}")
