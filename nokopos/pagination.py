"""
Pagination for list endpoints.

Reads ``page`` and ``limit`` from the query string and wraps the page in the
``{success, data, count, pagination}`` envelope used across the API.
"""

import math

from rest_framework import serializers
from rest_framework.pagination import BasePagination
from rest_framework.response import Response


class PageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False)


class EnvelopePagination(BasePagination):
    """
    Page/limit pagination that validates its own query parameters.

    A page past the end yields an empty ``data`` list rather than an error.
    """
    default_limit = 20

    def paginate_queryset(self, queryset, request, view=None):
        params = PageQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        self.page = params.validated_data['page']
        self.limit = params.validated_data.get('limit') or self.default_limit
        self.total = queryset.count()

        offset = (self.page - 1) * self.limit
        return list(queryset[offset:offset + self.limit])

    def get_paginated_response(self, data):
        return Response({
            'success': True,
            'data': data,
            'count': self.total,
            'pagination': {
                'page': self.page,
                'limit': self.limit,
                'total': self.total,
                'pages': math.ceil(self.total / self.limit),
            },
        })

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'properties': {
                'success': {'type': 'boolean'},
                'data': schema,
                'count': {'type': 'integer'},
                'pagination': {
                    'type': 'object',
                    'properties': {
                        'page': {'type': 'integer'},
                        'limit': {'type': 'integer'},
                        'total': {'type': 'integer'},
                        'pages': {'type': 'integer'},
                    },
                },
            },
        }


class MenuPagination(EnvelopePagination):
    default_limit = 50
