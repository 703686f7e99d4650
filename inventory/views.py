import logging

import django_filters
from django.db import DatabaseError
from django.db.models import Count
from django.http import Http404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, generics, status
from rest_framework.response import Response

from nokopos.exceptions import (
    CategoryInUse, CreateError, DeleteError, FetchError, ReservedCategory,
    ResourceNotFound, UpdateError,
)
from nokopos.pagination import MenuPagination
from .catalog import normalize_item_id
from .models import RESERVED_CATEGORY, Category, MenuItem
from .serializers import CategorySerializer, MenuItemSerializer

logger = logging.getLogger(__name__)


class MenuItemFilter(django_filters.FilterSet):
    """``category`` accepts a category id or name; ``all`` means no filter"""
    category = django_filters.CharFilter(method='filter_category')

    class Meta:
        model = MenuItem
        fields = ['category']

    def filter_category(self, queryset, name, value):
        value = value.strip()
        if not value or value.lower() == RESERVED_CATEGORY:
            return queryset
        category_id = normalize_item_id(value)
        if category_id:
            return queryset.filter(category_id=category_id)
        return queryset.filter(category__name=value.lower())


class CatalogObjectMixin:
    """Wraps lookups, updates and deletes with the catalog's error codes"""
    not_found_message = 'Resource not found'
    label = 'record'

    def get_object(self):
        try:
            return super().get_object()
        except Http404:
            raise ResourceNotFound(self.not_found_message)

    def update(self, request, *args, **kwargs):
        # PUT and PATCH both accept partial bodies
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            serializer.save()
        except DatabaseError:
            logger.exception("Error updating %s %s", self.label, instance.pk)
            raise UpdateError(f'Failed to update {self.label}')
        return Response({
            'success': True,
            'data': serializer.data,
            'message': f'{self.label.capitalize()} updated successfully',
        })


# Category Views
class CategoryListCreateView(generics.ListCreateAPIView):
    """
    get: List all categories ordered by name
    post: Create a new category
    """
    queryset = Category.objects.annotate(items_count=Count('items'))
    serializer_class = CategorySerializer
    pagination_class = None
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'display_name']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def list(self, request, *args, **kwargs):
        try:
            queryset = self.filter_queryset(self.get_queryset())
            data = self.get_serializer(queryset, many=True).data
        except DatabaseError:
            logger.exception("Error fetching categories")
            raise FetchError('Failed to fetch categories')
        return Response({'success': True, 'data': data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            serializer.save()
        except DatabaseError:
            logger.exception("Error creating category")
            raise CreateError('Failed to create category')
        logger.info("Category created: %s", serializer.data['name'])
        return Response({
            'success': True,
            'data': serializer.data,
            'message': 'Category created successfully',
        }, status=status.HTTP_201_CREATED)


class CategoryDetailView(CatalogObjectMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    get: Get category details
    put/patch: Update category
    delete: Delete category (never the reserved "all" category, never while in use)
    """
    queryset = Category.objects.annotate(items_count=Count('items'))
    serializer_class = CategorySerializer
    not_found_message = 'Category not found'
    label = 'category'

    def retrieve(self, request, *args, **kwargs):
        return Response({'success': True, 'data': self.get_serializer(self.get_object()).data})

    def destroy(self, request, *args, **kwargs):
        category = self.get_object()
        if category.is_reserved:
            raise ReservedCategory()
        if category.items.exists():
            raise CategoryInUse()
        try:
            category.delete()
        except DatabaseError:
            logger.exception("Error deleting category %s", category.pk)
            raise DeleteError('Failed to delete category')
        logger.info("Category deleted: %s", category.name)
        return Response({'success': True, 'message': 'Category deleted successfully'})


# Menu Views
class MenuListCreateView(generics.ListCreateAPIView):
    """
    get: List menu items, newest first, optionally filtered by category
    post: Create a new menu item
    """
    queryset = MenuItem.objects.select_related('category')
    serializer_class = MenuItemSerializer
    pagination_class = MenuPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = MenuItemFilter
    search_fields = ['name']
    ordering_fields = ['name', 'price', 'created_at']
    ordering = ['-created_at']

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        try:
            page = self.paginate_queryset(queryset)
            data = self.get_serializer(page, many=True).data
        except DatabaseError:
            logger.exception("Error fetching menu items")
            raise FetchError('Failed to fetch menu items')
        return self.get_paginated_response(data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            serializer.save()
        except DatabaseError:
            logger.exception("Error creating menu item")
            raise CreateError('Failed to create menu item')
        logger.info("Menu item created: %s", serializer.data['name'])
        return Response({
            'success': True,
            'data': serializer.data,
            'message': 'Menu item created successfully',
        }, status=status.HTTP_201_CREATED)


class MenuDetailView(CatalogObjectMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    get: Get menu item details
    put/patch: Update menu item
    delete: Delete menu item; historical orders keep their line items
    """
    queryset = MenuItem.objects.select_related('category')
    serializer_class = MenuItemSerializer
    not_found_message = 'Menu item not found'
    label = 'menu item'

    def retrieve(self, request, *args, **kwargs):
        return Response({'success': True, 'data': self.get_serializer(self.get_object()).data})

    def destroy(self, request, *args, **kwargs):
        menu_item = self.get_object()
        data = self.get_serializer(menu_item).data
        try:
            menu_item.delete()
        except DatabaseError:
            logger.exception("Error deleting menu item %s", menu_item.pk)
            raise DeleteError('Failed to delete menu item')
        logger.info("Menu item deleted: %s", menu_item.name)
        return Response({
            'success': True,
            'data': data,
            'message': 'Menu item deleted successfully',
        })
