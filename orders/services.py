"""
Order intake and reconciliation.

The client submits line items together with the total it believes is due.
The server never trusts that figure: it looks up every referenced menu item,
recomputes the total from current catalog prices and only persists the order
when both agree within ``ORDER_TOTAL_TOLERANCE``.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, localcontext

from django.conf import settings
from django.db import DatabaseError, transaction
from rest_framework.exceptions import ValidationError

from inventory.catalog import lookup_menu_items, normalize_item_id
from nokopos.exceptions import (
    CreateError, InvalidItems, InvalidStatusTransition, ResourceNotFound, TotalMismatch, UpdateError,
)
from .models import MAX_ORDER_TOTAL, Order, OrderItem

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


def to_money(value):
    """Quantize a Decimal to two places for display, whatever its magnitude"""
    value = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_total(items, menu_items):
    """Sum of quantity x current catalog price over all lines, exact"""
    total = Decimal('0')
    for line in items:
        menu_item = menu_items[normalize_item_id(line['itemId'])]
        total += menu_item.price * line['quantity']
    return total


def find_missing_item_ids(items, menu_items):
    missing = []
    for line in items:
        item_id = line['itemId']
        if normalize_item_id(item_id) not in menu_items and item_id not in missing:
            missing.append(item_id)
    return missing


def create_order(items, client_total, payment_method):
    """
    Validate, reconcile and persist an order.

    ``items`` is a list of ``{'itemId', 'quantity'}`` dicts that already passed
    structural validation. Returns ``(order, menu_items)`` where ``menu_items``
    maps each referenced id to its catalog entry.

    Raises InvalidItems or TotalMismatch when the request is rejected,
    ValidationError when the reconciled total is too large to store, and
    CreateError when the store fails. Nothing is written in any of those cases.
    """
    try:
        menu_items = lookup_menu_items(line['itemId'] for line in items)
    except DatabaseError:
        logger.exception("Error looking up menu items for order")
        raise CreateError('Failed to create order')

    missing = find_missing_item_ids(items, menu_items)
    if missing:
        logger.warning("Order rejected, unknown menu items: %s", missing)
        raise InvalidItems(details={'missingItemIds': missing})

    expected = compute_total(items, menu_items)
    received = Decimal(client_total)
    if abs(expected - received) > settings.ORDER_TOTAL_TOLERANCE:
        logger.warning("Order rejected, total mismatch: expected %s, received %s", expected, received)
        raise TotalMismatch(
            f'Total mismatch. Expected: {to_money(expected)}, Received: {to_money(received)}',
            details={'expected': to_money(expected), 'received': to_money(received)},
        )

    if expected > MAX_ORDER_TOTAL:
        logger.warning("Order rejected, total %s exceeds %s", expected, MAX_ORDER_TOTAL)
        raise ValidationError({'total': [f'Order total cannot exceed {MAX_ORDER_TOTAL}']})

    try:
        with transaction.atomic():
            order = Order.objects.create(
                total=to_money(expected),
                payment_method=payment_method,
                status=Order.Status.PENDING,
            )
            OrderItem.objects.bulk_create([
                OrderItem(
                    order=order,
                    item_id=normalize_item_id(line['itemId']),
                    quantity=line['quantity'],
                    position=position,
                )
                for position, line in enumerate(items)
            ])
    except DatabaseError:
        logger.exception("Error creating order")
        raise CreateError('Failed to create order')

    logger.info("Order created: %s total=%s method=%s", order.id, order.total, order.payment_method)
    return order, menu_items


def update_order_status(order_id, new_status):
    """Move an order along its status lifecycle; returns the updated order"""
    try:
        with transaction.atomic():
            order = Order.objects.select_for_update().filter(id=order_id).first()
            if order is None:
                raise ResourceNotFound('Order not found')

            if not order.can_transition_to(new_status):
                raise InvalidStatusTransition(
                    f'Cannot change order status from {order.status} to {new_status}',
                    details={'from': order.status, 'to': new_status},
                )

            order.status = new_status
            order.save(update_fields=['status', 'updated_at'])
    except DatabaseError:
        logger.exception("Error updating order %s status", order_id)
        raise UpdateError('Failed to update order status')

    logger.info("Order %s status set to %s", order.id, order.status)
    return order
