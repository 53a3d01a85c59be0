from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from typing import Any, AsyncGenerator, List, Optional

from ..enums import UserRole
from ..exceptions import ForbiddenException, PermissionRequiredException
from ..core.token_bearer import AccessTokenBearer
from ..db.database import AsyncSessionLocal
from ..models.user import User
from ..services.auth_service import AuthService
from ..services.order_events import OrderEventBus


auth_service = AuthService()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Asynchronous dependency that provides a database session for FastAPI routes.

    Yields:
        AsyncSession: An instance of the asynchronous database session.

    Usage:
        Use as a dependency in FastAPI endpoints to access the database session.
        The session is automatically closed after the request is processed.
    """

    async with AsyncSessionLocal() as db:
        yield db


def get_session_factory() -> async_sessionmaker:
    """ Session factory for long-lived handlers (websockets) that open one session per fetch. """
    return AsyncSessionLocal


def get_order_events(request: Request) -> OrderEventBus:
    return request.app.state.order_events


async def get_current_user(
    claims: dict = Depends(AccessTokenBearer()),
    session: AsyncSession = Depends(get_db),
) -> User:
    """
    Retrieve the current authenticated user based on the provided access token.

    Args:
        claims (dict): The verified claims of the bearer token.
        session (AsyncSession): The asynchronous database session dependency.

    Returns:
        User: The profile for the token subject, created on first sight.
    """
    return await auth_service.get_or_create_profile(claims, session)


async def get_optional_user(
    claims: Optional[dict] = Depends(AccessTokenBearer(required=False)),
    session: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """ Like ``get_current_user`` but returns ``None`` for guests. """
    if claims is None:
        return None
    return await auth_service.get_or_create_profile(claims, session)


class RoleChecker:
    """
    Dependency class for FastAPI route protection using Role Based Access Control (RBAC).

    Args:
        allowed_roles (List[UserRole]): Roles that are allowed to access the endpoint.

    Methods:
        __call__(current_user: User = Depends(get_current_user)) -> Any:
            Raises PermissionRequiredException (403) if the user does not have
            one of the allowed roles.
    """

    def __init__(self, allowed_roles: List[UserRole]):
        self.allowed_roles = allowed_roles


    async def __call__(self, current_user: User = Depends(get_current_user)) -> Any:
        if current_user.role in self.allowed_roles:
            return True

        raise PermissionRequiredException()


def get_current_admin(user: User = Depends(get_current_user)) -> User:
    if not user.role == UserRole.ADMIN:
        raise ForbiddenException(detail="Only admins can access this resource!")

    return user
