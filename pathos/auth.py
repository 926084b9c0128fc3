"""Request identity.

Credential checks and session issuance live in front of this service; the
session layer forwards the authenticated user id in the ``X-User-Id``
header. Everything downstream receives the id only through
``get_current_user_id``, never from a request body or query string.
"""

from fastapi import Depends, Header

from pathos.errors import UnauthorizedError
from pathos.users.service import UserService


def get_user_service() -> UserService:
    """Dependency placeholder — replaced at app startup."""
    raise RuntimeError("UserService not initialized")


async def get_current_user_id(
    x_user_id: str | None = Header(default=None),
    users: UserService = Depends(get_user_service),
) -> str:
    """The authenticated caller. 401 when the header is absent or names no user."""
    if not x_user_id:
        raise UnauthorizedError()
    if not await users.user_exists(x_user_id):
        raise UnauthorizedError()
    return x_user_id
