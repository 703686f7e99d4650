from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.utils import timezone
from rest_framework import serializers

from inventory.serializers import MenuItemSummarySerializer
from .models import MAX_LINE_QUANTITY, Order, OrderItem


class OrderItemInputSerializer(serializers.Serializer):
    itemId = serializers.CharField(max_length=64, trim_whitespace=True)
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_LINE_QUANTITY)


class OrderCreateSerializer(serializers.Serializer):
    """
    Request body for ``POST /api/orders/``.

    ``total`` is the client's claim; it is kept as the exact decimal that was
    sent and only compared against the server's own computation.
    """
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    total = serializers.DecimalField(max_digits=None, decimal_places=None, min_value=Decimal('0'))
    paymentMethod = serializers.ChoiceField(choices=Order.PaymentMethod.choices)


class OrderItemSerializer(serializers.ModelSerializer):
    itemId = serializers.CharField(source='item_id', read_only=True)
    menuItem = serializers.SerializerMethodField()

    class Meta:
        model = OrderItem
        fields = ['itemId', 'quantity', 'menuItem']

    def get_menuItem(self, obj):
        # Resolved catalog entries are passed in by the caller; without them the key is omitted
        menu_items = self.context.get('menu_items') or {}
        menu_item = menu_items.get(obj.item_id)
        if menu_item is None:
            return None
        return MenuItemSummarySerializer(menu_item).data

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if 'menu_items' not in self.context:
            data.pop('menuItem')
        return data


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    paymentMethod = serializers.CharField(source='payment_method', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Order
        fields = ['id', 'items', 'total', 'paymentMethod', 'status', 'createdAt', 'updatedAt']
        read_only_fields = fields


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)


class OrderListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices, required=False)


class AnalyticsQuerySerializer(serializers.Serializer):
    """Resolves the reporting window; both ends default relative to today"""
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)
    refresh = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        end_date = attrs.get('endDate') or timezone.localdate()
        start_date = attrs.get('startDate') or end_date - timedelta(days=settings.ANALYTICS_DEFAULT_DAYS)

        if start_date > end_date:
            raise serializers.ValidationError({'startDate': 'startDate must be on or before endDate'})

        attrs['startDate'] = start_date
        attrs['endDate'] = end_date
        return attrs
