"""
API module initialization
"""

from . import health, home, orders, products, reviews, users

__all__ = ["health", "home", "orders", "products", "reviews", "users"]
