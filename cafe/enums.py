import enum


class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    KITCHEN = "kitchen"
    STAFF = "staff"
    ADMIN = "admin"


class OrderType(str, enum.Enum):
    DINE_IN = "dine_in"
    PICKUP = "pickup"
    DELIVERY = "delivery"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    COOKING = "cooking"
    READY = "ready"
    SERVED = "served"
    CANCELLED = "cancelled"


class OrderAction(str, enum.Enum):
    ADVANCE = "advance"
    CANCEL = "cancel"


class DiscountType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class TableStatus(str, enum.Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"


class BoardView(str, enum.Enum):
    KITCHEN = "kitchen"
    STAFF = "staff"
    ADMIN = "admin"
    CUSTOMER = "customer"
