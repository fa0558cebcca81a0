"""
Order item service.

Every insert, update or delete of an item recomputes the owning order's
``total_amount`` from the stored subtotals.
"""

from decimal import Decimal
from typing import List

import structlog

from app.core.exceptions import BusinessRuleViolationException, EntityNotFoundException
from app.domain.mapping import order_item_mapper
from app.domain.models.order import TERMINAL_STATUSES, Order
from app.domain.models.order_item import OrderItem
from app.domain.repositories.order import OrderItemRepository, OrderRepository
from app.domain.repositories.product import ProductRepository
from app.domain.schemas.common import Page, PageRequest
from app.domain.schemas.order import (
    OrderItemCreate,
    OrderItemResponse,
    OrderItemUpdate,
    OrderTotalInconsistency,
)

logger = structlog.get_logger(__name__)


class OrderItemService:
    def __init__(
        self,
        order_items: OrderItemRepository,
        orders: OrderRepository,
        products: ProductRepository,
    ):
        self.order_items = order_items
        self.orders = orders
        self.products = products

    def create(self, request: OrderItemCreate) -> OrderItemResponse:
        order = self._get_open_order(request.order_id)
        product = self.products.get_by_id(request.product_id)
        if product is None:
            raise EntityNotFoundException("Product", "id", request.product_id)
        if not product.is_active:
            raise BusinessRuleViolationException("Product is not available", details={"product_id": product.id})

        item = order_item_mapper.to_entity(request, order=order, product=product)
        if item.unit_price is None:
            item.unit_price = product.price
        item.calculate_subtotal()
        item = self.order_items.create(item)
        logger.info(
            "Order item added",
            order_id=order.id,
            item_id=item.id,
            product_id=product.id,
            quantity=item.quantity,
        )
        self.recalculate_order_total(order.id)
        return order_item_mapper.to_response(item)

    def get(self, item_id: int) -> OrderItemResponse:
        return order_item_mapper.to_response(self.get_entity(item_id))

    def get_entity(self, item_id: int) -> OrderItem:
        item = self.order_items.get_by_id(item_id)
        if item is None:
            raise EntityNotFoundException("OrderItem", "id", item_id)
        return item

    def update(self, item_id: int, request: OrderItemUpdate) -> OrderItemResponse:
        item = self.get_entity(item_id)
        self._get_open_order(item.order_id)

        item = order_item_mapper.apply_update(item, request)
        item.calculate_subtotal()
        item = self.order_items.update(item)
        logger.info("Order item updated", item_id=item.id, quantity=item.quantity)
        self.recalculate_order_total(item.order_id)
        return order_item_mapper.to_response(item)

    def delete(self, item_id: int) -> None:
        item = self.get_entity(item_id)
        order_id = item.order_id
        self._get_open_order(order_id)
        self.order_items.delete(item)
        logger.info("Order item removed", item_id=item_id, order_id=order_id)
        self.recalculate_order_total(order_id)

    def list_by_order(self, order_id: int) -> List[OrderItemResponse]:
        return [order_item_mapper.to_response(item) for item in self.order_items.find_by_order(order_id)]

    def page_by_order(self, order_id: int, page: PageRequest) -> Page:
        return self.order_items.find_page_by_order(order_id, page).map(order_item_mapper.to_response)

    def list_by_product(self, product_id: int, page: PageRequest) -> Page:
        return self.order_items.find_by_product(product_id, page).map(order_item_mapper.to_response)

    def recalculate_order_total(self, order_id: int) -> Decimal:
        order = self._get_order(order_id)
        total = self.order_items.sum_subtotals(order_id)
        if order.total_amount != total:
            order.total_amount = total
            self.orders.update(order)
            logger.debug("Order total recalculated", order_id=order_id, total=str(total))
        return total

    def find_inconsistent_totals(self) -> List[OrderTotalInconsistency]:
        sums = self.order_items.sum_subtotals_by_order()
        inconsistent = []
        for order in self.orders.list_all():
            calculated = sums.get(order.id, Decimal("0.00"))
            if Decimal(order.total_amount or 0) != calculated:
                inconsistent.append(
                    OrderTotalInconsistency(
                        order_id=order.id,
                        stored_total=order.total_amount or Decimal("0.00"),
                        calculated_total=calculated,
                    )
                )
        return inconsistent

    def recalculate_all_totals(self) -> int:
        fixed = 0
        for entry in self.find_inconsistent_totals():
            self.recalculate_order_total(entry.order_id)
            fixed += 1
        if fixed:
            logger.info("Order totals repaired", count=fixed)
        return fixed

    def _get_order(self, order_id: int) -> Order:
        order = self.orders.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundException("Order", "id", order_id)
        return order

    def _get_open_order(self, order_id: int) -> Order:
        order = self._get_order(order_id)
        if order.status is not None and order.status.name in TERMINAL_STATUSES:
            raise BusinessRuleViolationException(
                f"Items of a {order.status.name.lower()} order cannot change",
                details={"order_id": order.id},
            )
        return order
