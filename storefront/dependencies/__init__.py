"""
Dependencies module initialization
"""

from .auth import get_current_user, require_admin
from .services import get_order_service, get_product_service, get_review_service, get_user_service

__all__ = [
    "get_current_user",
    "require_admin",
    "get_order_service",
    "get_product_service",
    "get_review_service",
    "get_user_service",
]
