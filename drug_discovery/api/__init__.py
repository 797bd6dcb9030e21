"""
HTTP routers for the Drug Discovery Dashboard.
"""
import logging

from ..config import settings

# Configure logging
logging.basicConfig(level=settings.log_level)

from .resources import router as resources_router  # noqa: E402
from .predictions import router as predictions_router  # noqa: E402

__all__ = ["resources_router", "predictions_router"]
