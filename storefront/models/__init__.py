"""
Models module initialization
"""

from .order import Order, OrderItem, OrderStatus, PaymentInfo, ShippingInfo
from .product import Product, ProductBase, ProductImage, Review
from .user import User, UserAccount, UserRole

__all__ = [
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentInfo",
    "ShippingInfo",
    "Product",
    "ProductBase",
    "ProductImage",
    "Review",
    "User",
    "UserAccount",
    "UserRole",
]
