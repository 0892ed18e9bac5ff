"""Identity provider reading the caller from request headers."""

from typing import Optional

from starlette.datastructures import Headers

from enrollment_gateway.domain.entities import CurrentUser
from enrollment_gateway.domain.interfaces import IdentityProvider

BEARER_PREFIX = "bearer "
USER_ID_HEADER = "X-User-ID"


class RequestIdentityProvider(IdentityProvider):
    """
    Resolves the caller from ``Authorization: Bearer <token>`` and
    ``X-User-ID``.

    Token issuance and validation happen upstream; a request carrying
    both headers is treated as authenticated.
    """

    def __init__(self, headers: Headers):
        self._headers = headers

    async def current_user(self) -> Optional[CurrentUser]:
        authorization = self._headers.get("authorization", "")
        if not authorization.lower().startswith(BEARER_PREFIX):
            return None

        credential = authorization[len(BEARER_PREFIX):].strip()
        user_id = self._headers.get(USER_ID_HEADER, "").strip()
        if not credential or not user_id:
            return None

        return CurrentUser(id=user_id, credential=credential)
