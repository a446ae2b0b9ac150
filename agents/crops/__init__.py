"""
Crop lifecycle agent package
"""

from .agent import CropLifecycleAgent
from .models import CropStatus, CropStatusRequest, CropStatusResponse

__all__ = ["CropLifecycleAgent", "CropStatus", "CropStatusRequest", "CropStatusResponse"]
