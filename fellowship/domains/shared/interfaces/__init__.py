"""
Shared interfaces for cross-domain communication.
"""

from .user_context import (
    UserContext,
    UserContextAdapter,
    UserPermissions,
)

__all__ = [
    "UserContext",
    "UserContextAdapter",
    "UserPermissions",
]
