"""
Wildcard permission matching.

Permissions are ``resource:action`` strings. A ``*`` in either segment of a
granted permission matches any value in that segment of the required one.
"""

import logging
from typing import Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

WILDCARD = "*"


def parse_permission(permission: str) -> Tuple[Optional[str], Optional[str]]:
    """Split ``resource:action``; anything else yields ``(None, None)``."""
    resource, sep, action = permission.partition(":")
    if not sep or not resource or not action or ":" in action:
        return None, None
    return resource, action


def permission_matches(granted: str, required: str) -> bool:
    """
    Check whether a granted permission satisfies a required one.

    Examples:
        ``documents:*`` satisfies ``documents:delete``;
        ``*:read`` satisfies ``users:read``;
        ``*:*`` satisfies anything well formed.
    """
    if granted == required:
        return True

    req_resource, req_action = parse_permission(required)
    granted_resource, granted_action = parse_permission(granted)
    if not all([req_resource, req_action, granted_resource, granted_action]):
        return False

    resource_match = granted_resource == WILDCARD or granted_resource == req_resource
    action_match = granted_action == WILDCARD or granted_action == req_action
    return resource_match and action_match


def has_permission(granted: Iterable[str], resource: str, action: str) -> bool:
    """True when any permission in ``granted`` satisfies ``resource:action``."""
    required = f"{resource}:{action}"
    for permission in granted:
        if permission_matches(permission, required):
            logger.debug(f"Permission match: '{permission}' satisfies '{required}'")
            return True
    return False
