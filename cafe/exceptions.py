from fastapi import Request, HTTPException, status
from fastapi.responses import JSONResponse
from typing import Any, Callable


class APIException(Exception):
    """ Base class for all exceptions in the Cafe API. """
    pass


class InvalidTokenException(APIException):
    """ Exception is thrown when user provided an expired or invalid token. """
    pass


class AccessTokenRequiredException(APIException):
    """ Exception is raised when a protected resource is requested without a bearer token. """
    pass


class PermissionRequiredException(APIException):
    """ Exception is thrown when a user does not have permission to peform the current action or access an endpoint/resource. """
    pass


class CartNotFoundException(APIException):
    """ Exception is raised when the cart session does not exist. """
    pass


class EmptyCartException(APIException):
    """ Exception is raised when checking out a cart with no items. """
    pass


class MenuItemUnavailableException(APIException):
    """ Exception is raised when a customer adds an unknown or unavailable menu item. """
    pass


class InvalidCouponException(APIException):
    """ Exception is raised when a coupon code is unknown, inactive or expired. """
    pass


class CouponUsageExhaustedException(APIException):
    """ Exception is raised when the user has used the coupon the maximum number of times. """
    pass


class CouponLoginRequiredException(APIException):
    """ Exception is raised when a guest applies a coupon that is limited per user. """
    pass


class CouponExistsException(APIException):
    """ Exception is raised if the admin adds a duplicate coupon code. """
    pass


class TableNotFoundException(APIException):
    """ Exception is raised when a dine-in order references a table that does not exist. """
    pass


class TableExistsException(APIException):
    """ Exception is raised if the admin adds a duplicate table number. """
    pass


class OrderNotFoundException(APIException):
    """ Exception is raised if an order record is not found. """
    pass


class IllegalTransitionException(APIException):
    """ Exception is raised when an order status change is not in the transition table. """

    def __init__(self, current: Any, target: Any):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move order from {getattr(current, 'value', current)} to {getattr(target, 'value', target)}")


class TransitionNotPermittedException(APIException):
    """ Exception is raised when the acting role may not take a legal transition. """

    def __init__(self, role: Any, target: Any):
        self.role = role
        self.target = target
        super().__init__(f"Role {getattr(role, 'value', role)} cannot move orders to {getattr(target, 'value', target)}")


class OrderPersistenceException(APIException):
    """ Exception is raised when the database rejects an order write. The cart is left untouched. """
    pass


class CheckoutValidationException(HTTPException):
    """ Raised when checkout details are incomplete for the chosen order type. """

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundException(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestException(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ForbiddenException(HTTPException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictException(HTTPException):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


def create_exception_handler(status_code: int, detail: Any = None) -> Callable[[Request, Exception], JSONResponse]:
    """
    Build a handler returning ``{"detail": ...}``. When ``detail`` is omitted the
    exception's own message is used, so domain errors can carry specifics.
    """
    async def exception_handler(request: Request, exception: APIException):
        return JSONResponse(
            content={"detail": detail if detail is not None else str(exception)},
            status_code=status_code
        )

    return exception_handler
