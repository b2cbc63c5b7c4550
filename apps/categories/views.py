"""
Category API views.

GET    /api/categories/               - List categories (public)
GET    /api/categories/{slug|id}/     - Category detail (public)
POST   /api/categories/               - Create (EDITOR/ADMIN)
PATCH  /api/categories/{id}/          - Update name/description/color (EDITOR/ADMIN)
DELETE /api/categories/{id}/          - Delete when unused (ADMIN)
POST   /api/categories/{id}/recount/  - Recompute article_count (ADMIN)
"""

import logging

from rest_framework import viewsets
from rest_framework.decorators import action

from apps.core.exceptions import created_response, success_response
from apps.core.permissions import CategoryManagePermission, IsAdmin
from apps.core.throttling import BurstThrottle

from . import counters
from .models import Category
from .serializers import (
    CategoryCreateSerializer,
    CategorySerializer,
    CategoryUpdateSerializer,
)
from .services import create_category, delete_category, get_category, update_category

logger = logging.getLogger(__name__)


class CategoryViewSet(viewsets.ViewSet):
    permission_classes = [CategoryManagePermission]
    throttle_classes = [BurstThrottle]
    lookup_value_regex = '[^/]+'

    def get_permissions(self):
        if self.action == 'recount':
            return [IsAdmin()]
        return super().get_permissions()

    def list(self, request):
        categories = Category.objects.order_by('name')
        return success_response({
            'categories': CategorySerializer(categories, many=True).data,
        })

    def retrieve(self, request, pk=None):
        category = get_category(pk)
        return success_response({'category': CategorySerializer(category).data})

    def create(self, request):
        serializer = CategoryCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = create_category(**serializer.validated_data)
        return created_response(
            {'category': CategorySerializer(category).data},
            message='Category created successfully',
        )

    def partial_update(self, request, pk=None):
        category = get_category(pk)
        serializer = CategoryUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = update_category(category, serializer.validated_data)
        return success_response(
            {'category': CategorySerializer(category).data},
            message='Category updated successfully',
        )

    def destroy(self, request, pk=None):
        category = get_category(pk)
        delete_category(category)
        return success_response(message='Category deleted successfully')

    @action(detail=True, methods=['post'])
    def recount(self, request, pk=None):
        """Recompute article_count from PUBLISHED articles. ADMIN only."""
        category = get_category(pk)
        drift = counters.recount(category)
        logger.info("Manual recount of %s by %s: drift %d", category.slug, request.user.pk, drift)
        return success_response({
            'category': CategorySerializer(category).data,
            'drift': drift,
        })
