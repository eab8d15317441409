"""
Order model
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.models.product import utc_now


class OrderStatus(str, Enum):
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"


class ShippingInfo(BaseModel):
    address: str
    city: str
    state: str
    country: str
    pin_code: int
    phone_no: int


class OrderItem(BaseModel):
    name: str
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    image: str
    product: str


class PaymentInfo(BaseModel):
    id: str
    status: str


class Order(BaseModel):
    """Order model as stored"""
    id: str
    shipping_info: ShippingInfo
    order_items: List[OrderItem]
    user: str
    payment_info: PaymentInfo
    paid_at: datetime
    items_price: float = 0
    tax_price: float = 0
    shipping_price: float = 0
    total_price: float = 0
    order_status: OrderStatus = OrderStatus.PROCESSING
    delivered_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
