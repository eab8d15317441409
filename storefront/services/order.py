"""
Order service containing business logic layer
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger
from storefront.models.order import Order, OrderStatus
from storefront.repositories.order import OrderRepository
from storefront.repositories.product import ProductRepository
from storefront.schemas.order import OrderCreate


class OrderService:
    """Service layer for order business logic"""

    def __init__(self, repository: OrderRepository, product_repository: ProductRepository):
        self.repository = repository
        self.product_repository = product_repository

    async def create_order(self, order_data: OrderCreate, user_id: str) -> Order:
        order = await self.repository.create(order_data, user_id)

        logger.info(
            f"Created order {order.id}",
            user_id=user_id,
            metadata={
                "event": "create_order",
                "order_id": order.id,
                "items": len(order.order_items),
                "total_price": order.total_price,
            }
        )
        return order

    async def get_order(self, order_id: str) -> Order:
        order = await self.repository.get_by_id(order_id)
        if not order:
            raise ErrorResponse("Order not found with this Id", status_code=404)
        return order

    async def my_orders(self, user_id: str) -> List[Order]:
        return await self.repository.list_by_user(user_id)

    async def get_all_orders(self) -> Dict[str, Any]:
        orders = await self.repository.list_all()
        total_amount = sum(order.total_price for order in orders)
        return {"orders": orders, "total_amount": total_amount}

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        """
        Move an order along Processing -> Shipped -> Delivered.

        Shipping takes the ordered quantities out of product stock.
        Delivered orders are final.
        """
        order = await self.repository.get_by_id(order_id)
        if not order:
            raise ErrorResponse("Order not found with this Id", status_code=404)

        if order.order_status == OrderStatus.DELIVERED:
            raise ErrorResponse("You have already delivered this order", status_code=400)

        if status == OrderStatus.SHIPPED:
            # All products must exist before any stock moves
            missing = await self.product_repository.find_missing(
                [item.product for item in order.order_items]
            )
            if missing:
                raise ErrorResponse(
                    f"Product with id {missing[0]} not found",
                    status_code=404,
                    details={"missing_products": missing},
                )
            for item in order.order_items:
                if not await self.product_repository.decrement_stock(item.product, item.quantity):
                    raise ErrorResponse(
                        f"Product with id {item.product} not found", status_code=404
                    )

        delivered_at = datetime.now(timezone.utc) if status == OrderStatus.DELIVERED else None
        updated = await self.repository.set_status(order_id, status.value, delivered_at)
        if not updated:
            raise ErrorResponse("Order not found with this Id", status_code=404)

        logger.info(
            f"Order {order_id} is now {status.value}",
            metadata={
                "event": "update_order_status",
                "order_id": order_id,
                "from": order.order_status.value,
                "to": status.value,
            }
        )
        return updated

    async def delete_order(self, order_id: str) -> None:
        if not await self.repository.delete(order_id):
            raise ErrorResponse("Order not found with this Id", status_code=404)

        logger.info(
            f"Deleted order {order_id}",
            metadata={"event": "delete_order", "order_id": order_id}
        )
