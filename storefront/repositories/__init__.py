"""
Repositories module initialization
"""

from .order import OrderRepository
from .product import ProductRepository
from .user import UserRepository

__all__ = [
    "OrderRepository",
    "ProductRepository",
    "UserRepository",
]
