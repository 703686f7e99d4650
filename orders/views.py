import logging

from django.db import DatabaseError
from django.http import HttpResponse
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from inventory.catalog import lookup_menu_items
from nokopos.exceptions import FetchError, ResourceNotFound
from nokopos.pagination import EnvelopePagination
from .analytics import build_daily_sales_report
from .cache import AnalyticsCache
from .export import build_sales_workbook
from .models import Order
from .serializers import (
    AnalyticsQuerySerializer, OrderCreateSerializer, OrderListQuerySerializer, OrderSerializer,
    OrderStatusSerializer,
)
from .services import create_order, update_order_status

logger = logging.getLogger(__name__)

date_params = [
    openapi.Parameter('startDate', openapi.IN_QUERY, description="First day (YYYY-MM-DD)", type=openapi.TYPE_STRING),
    openapi.Parameter('endDate', openapi.IN_QUERY, description="Last day (YYYY-MM-DD)", type=openapi.TYPE_STRING),
]


class AnalyticsCacheMixin:
    """
    Gives each request its own AnalyticsCache over ``analytics_cache_alias``.

    Views that write orders invalidate it; views that read reports go through it.
    """
    analytics_cache_alias = 'default'

    def get_analytics_cache(self):
        return AnalyticsCache(alias=self.analytics_cache_alias)


class OrderListCreateView(AnalyticsCacheMixin, generics.ListCreateAPIView):
    """List orders, newest first, or submit a new order"""
    serializer_class = OrderSerializer
    pagination_class = EnvelopePagination

    def get_queryset(self):
        queryset = Order.objects.prefetch_related('items').order_by('-created_at')

        params = OrderListQuerySerializer(data=self.request.query_params)
        params.is_valid(raise_exception=True)
        status_filter = params.validated_data.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, description="Filter by order status", type=openapi.TYPE_STRING,
                              enum=Order.Status.values),
            openapi.Parameter('page', openapi.IN_QUERY, description="Page number", type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, description="Page size (1-100)", type=openapi.TYPE_INTEGER),
        ]
    )
    def get(self, request, *args, **kwargs):
        queryset = self.get_queryset()
        try:
            page = self.paginate_queryset(queryset)
            data = self.get_serializer(page, many=True).data
        except DatabaseError:
            logger.exception("Error fetching orders")
            raise FetchError('Failed to fetch orders')
        return self.get_paginated_response(data)

    @swagger_auto_schema(
        operation_description="Submit an order; the total is recomputed from catalog prices and must match",
        request_body=OrderCreateSerializer,
        responses={
            201: OrderSerializer,
            400: 'VALIDATION_ERROR, INVALID_ITEMS or TOTAL_MISMATCH',
        }
    )
    def post(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order, menu_items = create_order(
            items=serializer.validated_data['items'],
            client_total=serializer.validated_data['total'],
            payment_method=serializer.validated_data['paymentMethod'],
        )
        self.get_analytics_cache().invalidate()

        data = OrderSerializer(order, context={'menu_items': menu_items}).data
        return Response({
            'success': True,
            'data': data,
            'message': 'Order created successfully',
        }, status=status.HTTP_201_CREATED)


class OrderDetailView(generics.RetrieveAPIView):
    """Retrieve a single order with its line items resolved against the catalog"""
    serializer_class = OrderSerializer

    def get(self, request, pk, *args, **kwargs):
        try:
            order = Order.objects.prefetch_related('items').filter(id=pk).first()
            if order is None:
                raise ResourceNotFound('Order not found')
            menu_items = lookup_menu_items(line.item_id for line in order.items.all())
        except DatabaseError:
            logger.exception("Error fetching order %s", pk)
            raise FetchError('Failed to fetch order')

        data = OrderSerializer(order, context={'menu_items': menu_items}).data
        return Response({'success': True, 'data': data})


class OrderStatusView(AnalyticsCacheMixin, APIView):
    @swagger_auto_schema(
        operation_description="Complete or cancel a pending order",
        request_body=OrderStatusSerializer,
        responses={
            200: OrderSerializer,
            400: 'INVALID_STATUS_TRANSITION',
            404: 'Order not found',
        }
    )
    def put(self, request, pk):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = update_order_status(pk, serializer.validated_data['status'])
        self.get_analytics_cache().invalidate()

        return Response({
            'success': True,
            'data': OrderSerializer(order).data,
            'message': 'Order status updated successfully',
        })


class DailyAnalyticsView(AnalyticsCacheMixin, APIView):
    """Daily sales report for a date range, cached for a few minutes"""

    @swagger_auto_schema(
        manual_parameters=date_params + [
            openapi.Parameter('refresh', openapi.IN_QUERY, description="Bypass the cached report",
                              type=openapi.TYPE_BOOLEAN),
        ]
    )
    def get(self, request):
        params = AnalyticsQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        report = self.get_analytics_cache().get_or_build(
            params.validated_data['startDate'],
            params.validated_data['endDate'],
            build_daily_sales_report,
            refresh=params.validated_data['refresh'],
        )
        return Response({'success': True, 'data': report})


class DailyAnalyticsExportView(AnalyticsCacheMixin, APIView):
    @swagger_auto_schema(
        operation_description="Download the daily sales report as an Excel workbook",
        manual_parameters=date_params,
        responses={200: openapi.Response(description="XLSX file")}
    )
    def get(self, request):
        params = AnalyticsQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        start_date = params.validated_data['startDate']
        end_date = params.validated_data['endDate']

        report = self.get_analytics_cache().get_or_build(
            start_date, end_date, build_daily_sales_report,
            refresh=params.validated_data['refresh'],
        )
        wb = build_sales_workbook(report, start_date, end_date)

        response = HttpResponse(content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
        response['Content-Disposition'] = f'attachment; filename="daily_sales_{start_date}_{end_date}.xlsx"'
        wb.save(response)
        return response
