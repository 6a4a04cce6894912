"""
Core configuration for the rental payments service.
"""

from core.config import Settings, settings

__all__ = ["Settings", "settings"]
