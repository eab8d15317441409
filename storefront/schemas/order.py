"""
API schemas for Order endpoints
"""

from typing import List
from pydantic import BaseModel, Field

from storefront.models.order import Order, OrderItem, OrderStatus, PaymentInfo, ShippingInfo


class OrderCreate(BaseModel):
    """Schema for placing a new order"""
    shipping_info: ShippingInfo
    order_items: List[OrderItem] = Field(..., min_length=1)
    payment_info: PaymentInfo
    items_price: float = Field(default=0, ge=0)
    tax_price: float = Field(default=0, ge=0)
    shipping_price: float = Field(default=0, ge=0)
    total_price: float = Field(default=0, ge=0)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderResponse(BaseModel):
    success: bool = True
    order: Order


class OrdersResponse(BaseModel):
    success: bool = True
    orders: List[Order]


class AdminOrdersResponse(OrdersResponse):
    total_amount: float = 0
