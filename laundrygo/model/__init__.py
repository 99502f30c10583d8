# ------ laundrygo/model/__init__.py ------

from .user import User, BranchAssignment
from .branch import Branch, Service, Detergent
from .order import Order, OrderItem, OrderHistory
from .notification import Notification
from .activity import ActivityLog

__all__ = [
    "User",
    "BranchAssignment",
    "Branch",
    "Service",
    "Detergent",
    "Order",
    "OrderItem",
    "OrderHistory",
    "Notification",
    "ActivityLog",
]
