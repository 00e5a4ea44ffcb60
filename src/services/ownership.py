"""
Ownership checks for user-owned resources.

A recipe may only be modified by the user who created it. The requester id
is supplied by the authentication layer in front of the service.
"""

import logging

from src.services.exceptions import AccessDenied
from src.services.logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


def is_owner(owner_id: int, requester_id: int) -> bool:
    """Return True if the requester owns the resource."""
    return requester_id is not None and owner_id == requester_id


def assert_owner(owner_id: int, requester_id: int, resource: str = "resource") -> None:
    """
    Verify the requester owns a resource.

    Args:
        owner_id: ID of the user that owns the resource
        requester_id: ID of the authenticated user making the request
        resource: Resource name used in the error message

    Raises:
        AccessDenied: If the requester is not the owner
    """
    if not is_owner(owner_id, requester_id):
        log_operation(
            logger,
            operation="assert_owner",
            outcome="access_denied",
            level=logging.WARNING,
            resource=resource,
            owner_id=owner_id,
            requester_id=requester_id,
        )
        raise AccessDenied(resource)
