"""
Permission Core - capability guard.
"""

from paperdesk.kernel.permissions.permission_service import Capability, PermissionService

__all__ = [
    "Capability",
    "PermissionService",
]
