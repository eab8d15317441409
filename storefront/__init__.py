"""
Storefront Service - product catalog, reviews and orders over MongoDB
"""

__version__ = "1.0.0"
