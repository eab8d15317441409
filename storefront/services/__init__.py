"""
Services module initialization
"""

from .order import OrderService
from .product import ProductService
from .review import ReviewService
from .user import UserService

__all__ = [
    "OrderService",
    "ProductService",
    "ReviewService",
    "UserService",
]
