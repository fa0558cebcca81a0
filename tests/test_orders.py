from decimal import Decimal

import pytest

from app.core.exceptions import BusinessRuleViolationException, EntityNotFoundException
from app.domain.schemas.common import PageRequest
from app.domain.schemas.order import OrderCreate, OrderItemCreate, OrderItemUpdate, OrderUpdate
from app.domain.schemas.product import ProductCreate


@pytest.fixture
def order(order_service, waiter, table, statuses):
    return order_service.create(
        OrderCreate(user_id=waiter.id, table_id=table.id, status_id=statuses["Confirmed"].id, notes="Window seat")
    )


def add_latte(order_item_service, order, latte, quantity=2, **kwargs):
    return order_item_service.create(
        OrderItemCreate(order_id=order.id, product_id=latte.id, quantity=quantity, **kwargs)
    )


def test_new_order_is_confirmed(order):
    assert order.status.name == "Confirmed"
    assert order.confirmed_at is not None
    assert order.created_at is not None
    assert order.in_progress_at is None
    assert order.total_amount == Decimal("0.00")
    assert order.user.employee_id == "EMP0100"
    assert order.table.table_number == "12"


def test_inactive_user_cannot_open_orders(order_service, user_service, waiter, table, statuses):
    user_service.deactivate(waiter.id)
    with pytest.raises(BusinessRuleViolationException):
        order_service.create(OrderCreate(user_id=waiter.id, table_id=table.id, status_id=statuses["Confirmed"].id))


def test_unknown_table_is_rejected(order_service, waiter, statuses):
    with pytest.raises(EntityNotFoundException):
        order_service.create(OrderCreate(user_id=waiter.id, table_id=99, status_id=statuses["Confirmed"].id))


def test_item_unit_price_defaults_to_product_price(order_item_service, order, latte):
    item = add_latte(order_item_service, order, latte, quantity=3)
    assert item.unit_price == Decimal("4.50")
    assert item.subtotal == Decimal("13.50")
    assert item.product.name == "Latte"


def test_explicit_unit_price_is_kept(order_item_service, order, latte):
    item = add_latte(order_item_service, order, latte, quantity=2, unit_price=Decimal("4.00"))
    assert item.subtotal == Decimal("8.00")


def test_order_total_follows_items(order_service, order_item_service, order, latte):
    first = add_latte(order_item_service, order, latte, quantity=2)
    add_latte(order_item_service, order, latte, quantity=1)
    assert order_service.get(order.id).total_amount == Decimal("13.50")

    order_item_service.update(first.id, OrderItemUpdate(quantity=4))
    assert order_service.get(order.id).total_amount == Decimal("22.50")

    order_item_service.delete(first.id)
    assert order_service.get(order.id).total_amount == Decimal("4.50")
    assert len(order_item_service.list_by_order(order.id)) == 1


def test_inactive_product_cannot_be_ordered(order_item_service, product_service, order, latte):
    product_service.set_active(latte.id, False)
    with pytest.raises(BusinessRuleViolationException):
        add_latte(order_item_service, order, latte)


def test_lifecycle_timestamps_are_stamped_once(order_service, order, statuses):
    confirmed_at = order.confirmed_at
    in_progress = order_service.change_status(order.id, statuses["In Progress"].id)
    assert in_progress.in_progress_at is not None
    assert in_progress.confirmed_at == confirmed_at

    completed = order_service.change_status_by_name(order.id, "Completed")
    assert completed.completed_at is not None
    assert completed.in_progress_at == in_progress.in_progress_at

    paid = order_service.change_status_by_name(order.id, "Paid")
    assert paid.paid_at is not None
    assert paid.status.name == "Paid"


def test_status_cannot_move_backwards(order_service, order, statuses):
    order_service.change_status_by_name(order.id, "Completed")
    with pytest.raises(BusinessRuleViolationException):
        order_service.change_status(order.id, statuses["In Progress"].id)


def test_same_status_is_a_no_op(order_service, order, statuses):
    again = order_service.change_status(order.id, statuses["Confirmed"].id)
    assert again.confirmed_at == order.confirmed_at


def test_paid_order_is_final(order_service, order_item_service, order, latte):
    add_latte(order_item_service, order, latte)
    order_service.change_status_by_name(order.id, "Paid")

    with pytest.raises(BusinessRuleViolationException):
        order_service.cancel(order.id)
    with pytest.raises(BusinessRuleViolationException):
        order_service.update(order.id, OrderUpdate(notes="Too late"))
    with pytest.raises(BusinessRuleViolationException):
        add_latte(order_item_service, order, latte)
    with pytest.raises(BusinessRuleViolationException):
        order_service.delete(order.id)


def test_cancel_stamps_canceled_at(order_service, order):
    canceled = order_service.cancel(order.id)
    assert canceled.status.name == "Canceled"
    assert canceled.canceled_at is not None
    with pytest.raises(BusinessRuleViolationException):
        order_service.change_status_by_name(order.id, "In Progress")


def test_update_order_notes_and_table(order_service, table_service, order):
    from app.domain.schemas.table import TableCreate

    patio = table_service.create(TableCreate(table_number="P1", capacity=2))
    updated = order_service.update(order.id, OrderUpdate(notes="Moved outside", table_id=patio.id))
    assert updated.notes == "Moved outside"
    assert updated.table.table_number == "P1"


def test_delete_open_order_removes_items(order_service, order_item_service, order, latte):
    add_latte(order_item_service, order, latte)
    order_service.delete(order.id)
    with pytest.raises(EntityNotFoundException):
        order_service.get(order.id)
    assert order_item_service.list_by_order(order.id) == []


def test_order_listing_and_stats(order_service, order_item_service, order, latte, waiter, table, statuses):
    second = order_service.create(
        OrderCreate(user_id=waiter.id, table_id=table.id, status_id=statuses["Confirmed"].id, is_takeaway=True)
    )
    add_latte(order_item_service, order, latte, quantity=2)
    add_latte(order_item_service, second, latte, quantity=1)
    order_service.change_status_by_name(order.id, "Paid")

    assert order_service.list_by_status_name("Confirmed", PageRequest()).total == 1
    assert order_service.list_by_table(table.id, PageRequest()).total == 2
    assert order_service.search_by_notes("window", PageRequest()).total == 1

    stats = order_service.stats()
    assert stats.total_orders == 2
    assert stats.orders_today == 2
    assert stats.total_revenue == Decimal("9.00")
    assert stats.orders_by_status["Paid"] == 1
    assert stats.orders_by_status["Confirmed"] == 1
    assert stats.orders_by_status["Canceled"] == 0


def test_status_in_use_cannot_be_deleted(status_service, order, statuses):
    with pytest.raises(BusinessRuleViolationException):
        status_service.delete(statuses["Confirmed"].id)
    status_service.delete(statuses["Canceled"].id)


def test_table_with_orders_cannot_be_deleted(table_service, order, table):
    with pytest.raises(BusinessRuleViolationException):
        table_service.delete(table.id)


def test_inconsistent_totals_are_repaired(order_item_service, repos, order, latte):
    add_latte(order_item_service, order, latte, quantity=2)
    stored = repos.orders.get_by_id(order.id)
    stored.total_amount = Decimal("1.00")
    repos.orders.update(stored)

    inconsistent = order_item_service.find_inconsistent_totals()
    assert [(i.order_id, i.calculated_total) for i in inconsistent] == [(order.id, Decimal("9.00"))]
    assert order_item_service.recalculate_all_totals() == 1
    assert order_item_service.find_inconsistent_totals() == []
