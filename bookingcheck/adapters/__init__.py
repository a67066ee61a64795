"""
Adapters layer - Data sources for the booking service.
"""

from .json_repository import JsonRepository

__all__ = ["JsonRepository"]
