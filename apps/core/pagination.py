"""
Page-number pagination rendered inside the success envelope.

    GET /api/articles/?page=2&limit=20

    {"success": true,
     "data": {"results": [...],
              "pagination": {"page": 2, "limit": 20, "total": 57,
                             "pages": 3, "has_more": true}},
     "timestamp": "..."}
"""

import math

from rest_framework.pagination import PageNumberPagination

from .exceptions import success_response


class EnvelopePagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = 'limit'
    max_page_size = 50

    def get_paginated_response(self, data):
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        page_number = self.page.number
        return success_response({
            'results': data,
            'pagination': {
                'page': page_number,
                'limit': limit,
                'total': total,
                'pages': math.ceil(total / limit) if limit else 0,
                'has_more': page_number * limit < total,
            },
        })

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'properties': {
                'success': {'type': 'boolean'},
                'data': {
                    'type': 'object',
                    'properties': {
                        'results': schema,
                        'pagination': {'type': 'object'},
                    },
                },
                'timestamp': {'type': 'string'},
            },
        }
