from typing import Optional

import jwt
from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Config
from ..exceptions import AccessTokenRequiredException, InvalidTokenException


def decode_token(token: str) -> dict:
    """
    Verify a bearer token issued by the auth provider and return its claims.

    Raises:
        InvalidTokenException: If the signature, expiry or audience is wrong, or
        the token has no subject.
    """
    try:
        claims = jwt.decode(
            token,
            Config.JWT_SECRET,
            algorithms=[Config.JWT_ALGORITHM],
            audience=Config.JWT_AUDIENCE,
        )
    except jwt.PyJWTError as e:
        raise InvalidTokenException() from e

    if not claims.get("sub"):
        raise InvalidTokenException()

    return claims


class AccessTokenBearer(HTTPBearer):
    """
    Bearer scheme returning the decoded token claims.

    With ``required=False`` a missing header yields ``None`` so guest-capable
    routes can still identify signed-in callers. A header that is present but
    invalid is always rejected.
    """

    def __init__(self, required: bool = True):
        super().__init__(auto_error=False)
        self.required = required


    async def __call__(self, request: Request) -> Optional[dict]:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)

        if credentials is None:
            if self.required:
                raise AccessTokenRequiredException()
            return None

        return decode_token(credentials.credentials)
