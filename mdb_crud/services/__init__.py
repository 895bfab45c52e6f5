"""
Service layer: generic CRUD service and model mapping.
"""

from .base import BaseService
from .mapping import Mapper

__all__ = [
    "BaseService",
    "Mapper",
]
