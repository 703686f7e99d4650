import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from inventory.models import TimeStampedModel

# Largest values the order columns can hold on every supported backend
MAX_ORDER_TOTAL = Decimal('99999999.99')
MAX_LINE_QUANTITY = 2147483647


class Order(TimeStampedModel):
    """A completed sale; ``total`` is always the server-computed amount"""

    class PaymentMethod(models.TextChoices):
        CASH = 'cash', 'Cash'
        DEBIT = 'debit', 'Debit'
        EWALLET = 'ewallet', 'E-Wallet'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    # Allowed moves out of each status; a same-status update is always a no-op
    TRANSITIONS = {
        'pending': {'completed', 'cancelled'},
        'completed': set(),
        'cancelled': set(),
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    total = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['created_at'], name='idx_orders_created_at'),
            models.Index(fields=['status'], name='idx_orders_status'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(total__gte=0), name='order_total_non_negative'),
        ]

    def can_transition_to(self, new_status):
        current, new_status = str(self.status), str(new_status)
        return new_status == current or new_status in self.TRANSITIONS.get(current, set())

    def __str__(self):
        return f"Order {self.id} - {self.total} ({self.payment_method})"


class OrderItem(models.Model):
    """
    One line of an order.

    ``item_id`` references a MenuItem by id without a foreign key, so menu
    items can be deleted while historical orders keep their lines.
    """
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    item_id = models.CharField(max_length=64)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        db_table = 'order_items'
        ordering = ['position']
        indexes = [
            models.Index(fields=['item_id'], name='idx_order_items_item_id'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(quantity__gte=1), name='order_item_quantity_positive'),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.item_id}"
