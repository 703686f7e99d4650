"""
Daily sales analytics.

Orders in the requested window are bucketed by the calendar day they were
created on (server time zone) and joined against the live catalog. Item
revenue therefore reflects current menu prices, and lines whose menu item
has since been deleted are left out of the item breakdown.
"""

import logging
from datetime import datetime, time
from decimal import Decimal

from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone

from inventory.catalog import catalog_snapshot
from nokopos.exceptions import AnalyticsError
from .models import Order
from .services import to_money

logger = logging.getLogger(__name__)


def resolve_date_range(start_date, end_date):
    """Expand two calendar dates to aware datetimes covering both days fully"""
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(start_date, time.min), tz)
    end = timezone.make_aware(datetime.combine(end_date, time.max), tz)
    return start, end


def _new_day(day):
    return {
        'date': day,
        'transactions': 0,
        'revenue': Decimal('0'),
        'items': {},
        'paymentMethods': {method: 0 for method in Order.PaymentMethod.values},
    }


def aggregate_daily_sales(orders, menu_items):
    """
    Fold orders into per-day buckets.

    Returns a dict keyed by ``date`` whose ``items`` are still keyed by item id.
    """
    days = {}
    for order in orders:
        day = timezone.localtime(order.created_at).date()
        bucket = days.get(day)
        if bucket is None:
            bucket = days[day] = _new_day(day)

        bucket['transactions'] += 1
        bucket['revenue'] += order.total
        if order.payment_method in bucket['paymentMethods']:
            bucket['paymentMethods'][order.payment_method] += 1

        for line in order.items.all():
            menu_item = menu_items.get(line.item_id)
            if menu_item is None:
                continue
            entry = bucket['items'].get(line.item_id)
            if entry is None:
                entry = bucket['items'][line.item_id] = {
                    'itemId': line.item_id,
                    'name': menu_item.name,
                    'quantity': 0,
                    'revenue': Decimal('0'),
                    'category': menu_item.category.name,
                }
            entry['quantity'] += line.quantity
            entry['revenue'] += menu_item.price * line.quantity
    return days


def rank_top_items(days, limit):
    """Merge the per-day item rows and rank them by quantity sold"""
    totals = {}
    for bucket in days.values():
        for item_id, entry in bucket['items'].items():
            merged = totals.get(item_id)
            if merged is None:
                totals[item_id] = dict(entry)
            else:
                merged['quantity'] += entry['quantity']
                merged['revenue'] += entry['revenue']

    ranked = sorted(
        totals.values(),
        key=lambda entry: (-entry['quantity'], -entry['revenue'], entry['name'], entry['itemId']),
    )
    return ranked[:limit]


def _render_item(entry):
    return {**entry, 'revenue': to_money(entry['revenue'])}


def build_daily_sales_report(start_date, end_date):
    """
    Build the daily sales report for ``start_date``..``end_date`` inclusive.

    Raises AnalyticsError if either read fails; no partial report is returned.
    """
    start, end = resolve_date_range(start_date, end_date)

    try:
        orders = list(
            Order.objects.filter(created_at__gte=start, created_at__lte=end)
            .prefetch_related('items')
            .order_by('created_at')
        )
        menu_items = catalog_snapshot()
    except DatabaseError:
        logger.exception("Error fetching sales analytics for %s..%s", start_date, end_date)
        raise AnalyticsError()

    days = aggregate_daily_sales(orders, menu_items)

    total_revenue = sum((bucket['revenue'] for bucket in days.values()), Decimal('0'))
    total_transactions = len(orders)
    average = total_revenue / total_transactions if total_transactions else Decimal('0')

    daily_sales = []
    for day in sorted(days, reverse=True):
        bucket = days[day]
        daily_sales.append({
            'date': day.isoformat(),
            'transactions': bucket['transactions'],
            'revenue': to_money(bucket['revenue']),
            'items': [_render_item(entry) for entry in bucket['items'].values()],
            'paymentMethods': bucket['paymentMethods'],
        })

    top_items = rank_top_items(days, settings.ANALYTICS_TOP_ITEMS_LIMIT)

    logger.debug("Analytics built for %s..%s: %d orders over %d days",
                 start_date, end_date, total_transactions, len(days))
    return {
        'summary': {
            'totalRevenue': to_money(total_revenue),
            'totalTransactions': total_transactions,
            'averageOrderValue': to_money(average),
            'dateRange': {
                'start': start.isoformat(),
                'end': end.isoformat(),
            },
        },
        'dailySales': daily_sales,
        'topItems': [_render_item(entry) for entry in top_items],
        'totalDays': len(daily_sales),
    }
