"""Caller resolution shared by the application services."""

from enrollment_gateway.domain.entities import CurrentUser
from enrollment_gateway.domain.exceptions import UnauthorizedException
from enrollment_gateway.domain.interfaces import IdentityProvider


async def require_current_user(identity: IdentityProvider) -> CurrentUser:
    """
    Resolve the caller or refuse the operation.

    Raises:
        UnauthorizedException: If no one is signed in
    """
    user = await identity.current_user()
    if user is None:
        raise UnauthorizedException()
    return user
