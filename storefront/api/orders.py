"""
Order API endpoints
"""

from fastapi import APIRouter, Depends, status

from storefront.core.errors import ErrorResponseModel
from storefront.dependencies.auth import get_current_user, require_admin
from storefront.dependencies.services import get_order_service
from storefront.models.user import User
from storefront.schemas.order import (
    AdminOrdersResponse,
    OrderCreate,
    OrderResponse,
    OrdersResponse,
    OrderStatusUpdate,
)
from storefront.schemas.product import MessageResponse
from storefront.services.order import OrderService

router = APIRouter(tags=["orders"])


@router.post(
    "/order/new",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponseModel}},
)
async def new_order(
    order: OrderCreate,
    service: OrderService = Depends(get_order_service),
    user: User = Depends(get_current_user),
):
    created = await service.create_order(order, user_id=user.id)
    return OrderResponse(order=created)


@router.get(
    "/order/{order_id}",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponseModel}},
)
async def get_single_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
    user: User = Depends(get_current_user),
):
    order = await service.get_order(order_id)
    return OrderResponse(order=order)


@router.get("/orders/me", response_model=OrdersResponse)
async def my_orders(
    service: OrderService = Depends(get_order_service),
    user: User = Depends(get_current_user),
):
    orders = await service.my_orders(user.id)
    return OrdersResponse(orders=orders)


@router.get("/admin/orders", response_model=AdminOrdersResponse, tags=["admin"])
async def get_all_orders(
    service: OrderService = Depends(get_order_service),
    user: User = Depends(require_admin),
):
    """All orders with the sum of their totals."""
    result = await service.get_all_orders()
    return AdminOrdersResponse(orders=result["orders"], total_amount=result["total_amount"])


@router.put(
    "/admin/order/{order_id}",
    response_model=OrderResponse,
    responses={400: {"model": ErrorResponseModel}, 404: {"model": ErrorResponseModel}},
    tags=["admin"],
)
async def update_order(
    order_id: str,
    body: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
    user: User = Depends(require_admin),
):
    """Advance order status; shipping deducts stock, delivered orders are final."""
    order = await service.update_order_status(order_id, body.status)
    return OrderResponse(order=order)


@router.delete(
    "/admin/order/{order_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponseModel}},
    tags=["admin"],
)
async def delete_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
    user: User = Depends(require_admin),
):
    await service.delete_order(order_id)
    return MessageResponse(message="Order Deleted Successfully")
