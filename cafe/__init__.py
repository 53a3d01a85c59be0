from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cafe.core.config import Config
from cafe.core.logging import configure_logging
from cafe.db.database import init_db
from cafe.exceptions import (
    create_exception_handler,
    AccessTokenRequiredException,
    CartNotFoundException,
    CouponExistsException,
    CouponLoginRequiredException,
    CouponUsageExhaustedException,
    EmptyCartException,
    IllegalTransitionException,
    InvalidCouponException,
    InvalidTokenException,
    MenuItemUnavailableException,
    OrderNotFoundException,
    OrderPersistenceException,
    PermissionRequiredException,
    TableExistsException,
    TableNotFoundException,
    TransitionNotPermittedException,
)
from cafe.middleware.auth_middleware import CustomAuthMiddleWare
from cafe.routers.account import router as account_router
from cafe.routers.admin import router as admin_router
from cafe.routers.cart import router as cart_router
from cafe.routers.contact import router as contact_router
from cafe.routers.menu import router as menu_router
from cafe.routers.orders import router as orders_router
from cafe.routers.realtime import router as realtime_router
from cafe.services.order_events import OrderEventBus

load_dotenv()
configure_logging()

api_version = "v1"
swagger_docs_url = f"/api/{api_version}/docs"
redoc_docs_url = f"/api/{api_version}/redoc"
openapi_url = f"/api/{api_version}/openapi.json"


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.order_events = OrderEventBus()
    if Config.CREATE_TABLES_ON_STARTUP:
        await init_db()
    yield


app = FastAPI(
    docs_url=swagger_docs_url,
    redoc_url=redoc_docs_url,
    openapi_url=openapi_url,
    title="Cafe Ordering API",
    description="Ordering API for a café: cart, checkout, order boards and back office.",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware first
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'],
    allow_headers=["*"],
)

app.add_middleware(CustomAuthMiddleWare)

# Register endpoints
app.include_router(menu_router, prefix=f'/api/{api_version}', tags=["Menu"])
app.include_router(cart_router, prefix=f'/api/{api_version}/cart', tags=["Cart"])
app.include_router(orders_router, prefix=f'/api/{api_version}/orders', tags=["Orders"])
app.include_router(contact_router, prefix=f'/api/{api_version}/contact', tags=["Contact"])
app.include_router(account_router, prefix=f'/api/{api_version}/account', tags=["Account"])
app.include_router(admin_router, prefix=f'/api/{api_version}/admin', tags=["Admin"])
app.include_router(realtime_router, prefix=f'/api/{api_version}/realtime', tags=["Realtime"])


@app.get("/")
async def root():
    return {
        "message": "Cafe Ordering API",
        "version": "1.0.0",
        "docs": swagger_docs_url,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# Register custom exceptions

# Auth-related exception handlers
app.add_exception_handler(AccessTokenRequiredException, create_exception_handler(401, "Authentication required!"))
app.add_exception_handler(InvalidTokenException, create_exception_handler(401, "Invalid or expired token provided!"))
app.add_exception_handler(PermissionRequiredException, create_exception_handler(403, "You don't have permission to access this resource."))

# Cart and coupon exception handlers
app.add_exception_handler(CartNotFoundException, create_exception_handler(404, "Cart not found."))
app.add_exception_handler(EmptyCartException, create_exception_handler(400, "Your cart is empty."))
app.add_exception_handler(MenuItemUnavailableException, create_exception_handler(400, "This menu item is not available."))
app.add_exception_handler(InvalidCouponException, create_exception_handler(400, "This coupon code is not valid or has expired."))
app.add_exception_handler(CouponUsageExhaustedException, create_exception_handler(400, "You have already used this coupon the maximum number of times."))
app.add_exception_handler(CouponLoginRequiredException, create_exception_handler(401, "Please sign in to use this coupon."))
app.add_exception_handler(CouponExistsException, create_exception_handler(409, "A coupon with this code already exists."))

# Table exception handlers
app.add_exception_handler(TableNotFoundException, create_exception_handler(400, "No table with that number."))
app.add_exception_handler(TableExistsException, create_exception_handler(409, "A table with this number already exists."))

# Order exception handlers
app.add_exception_handler(OrderNotFoundException, create_exception_handler(404, "Order not found."))
app.add_exception_handler(IllegalTransitionException, create_exception_handler(409))
app.add_exception_handler(TransitionNotPermittedException, create_exception_handler(403))
app.add_exception_handler(OrderPersistenceException, create_exception_handler(503, "Could not save your order. Please try again."))
