"""Service layer.

This module provides the services the repositories depend on.
"""

from .hashing_service import HashingService

__all__ = ["HashingService"]
