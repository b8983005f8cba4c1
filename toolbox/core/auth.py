"""
Authorization gate for tool invocations.
"""

from typing import Iterable, Optional, Sequence

DEFAULT_AUTH_TOKEN_HEADER = "Authorization"


class AccessToken(str):
    """Raw access token as received from the caller's auth header."""


def is_authorized(
    auth_required: Optional[Sequence[str]],
    verified_auth_services: Optional[Iterable[str]],
) -> bool:
    """
    Decide whether a caller may invoke a tool.

    A tool with no required auth services is open to everyone; otherwise a
    single verified service from the required set is enough.
    """
    if not auth_required:
        return True
    verified = set(verified_auth_services or ())
    return any(service in verified for service in auth_required)
