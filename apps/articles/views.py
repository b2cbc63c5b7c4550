"""
Article API views.

GET    /api/articles/                    - List (public sees PUBLISHED; staff may filter by status)
POST   /api/articles/                    - Create in DRAFT (any staff role)
GET    /api/articles/{id}/               - Detail (non-PUBLISHED for staff only)
PATCH  /api/articles/{id}/               - Edit content and/or status
DELETE /api/articles/{id}/               - Delete (author or EDITOR/ADMIN)
GET    /api/articles/slug/{slug}/        - Detail by slug, counts a view when PUBLISHED
POST   /api/articles/{id}/transition/    - Change status: {"status": ..., "note": ...}
GET    /api/articles/{id}/transitions/   - Statuses the caller may request next
GET    /api/articles/{id}/history/       - Status change log
GET    /api/articles/{id}/related/       - Related PUBLISHED articles
GET    /api/articles/trending/           - Most viewed recent PUBLISHED articles
"""

import logging

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated

from apps.core.exceptions import ValidationError, created_response, success_response
from apps.core.permissions import IsStaffMember, get_user_role
from apps.core.throttling import BurstThrottle

from . import services
from .engine import WorkflowEngine
from .serializers import (
    ArticleDetailSerializer,
    ArticleListSerializer,
    ArticleStatusChangeSerializer,
    ArticleWriteSerializer,
    TransitionSerializer,
)
from .workflow import allowed_targets

logger = logging.getLogger(__name__)

PUBLIC_ACTIONS = ('list', 'retrieve', 'by_slug', 'related', 'trending')
MAX_RELATED = 20
MAX_TRENDING = 50
MAX_TRENDING_DAYS = 365


def _bounded_int(params, name, default, upper):
    raw = params.get(name)
    if raw in (None, ''):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer", field=name)
    return max(1, min(value, upper))


class ArticleViewSet(viewsets.GenericViewSet):
    throttle_classes = [BurstThrottle]
    serializer_class = ArticleDetailSerializer
    engine_class = WorkflowEngine

    def get_permissions(self):
        if self.action in PUBLIC_ACTIONS:
            return [AllowAny()]
        return [IsAuthenticated(), IsStaffMember()]

    def get_queryset(self):
        return services.visible_articles(self.request.user)

    def get_object(self):
        article = services.get_visible_article(self.request.user, pk=self.kwargs['pk'])
        self.check_object_permissions(self.request, article)
        return article

    @property
    def engine(self) -> WorkflowEngine:
        return self.engine_class()

    def _article_payload(self, article):
        return {'article': ArticleDetailSerializer(article).data}

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def list(self, request):
        queryset = services.filter_articles(request.user, request.query_params)
        page = self.paginate_queryset(queryset)
        data = ArticleListSerializer(page, many=True).data
        return self.get_paginated_response(data)

    def retrieve(self, request, pk=None):
        return success_response(self._article_payload(self.get_object()))

    def create(self, request):
        serializer = ArticleWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        if 'seo' in data:
            data['seo'] = dict(data['seo'])

        article = self.engine.create_article(
            request.user,
            data,
            initial_status=data.pop('status', None),
            note=data.pop('note', ''),
        )
        return created_response(self._article_payload(article), message='Article created successfully')

    def partial_update(self, request, pk=None):
        article = self.get_object()
        serializer = ArticleWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        changes = dict(serializer.validated_data)
        if 'seo' in changes:
            changes['seo'] = dict(changes['seo'])

        target_status = changes.pop('status', None)
        note = changes.pop('note', '')
        article = self.engine.update_article(
            request.user, article, changes, target_status=target_status, note=note,
        )
        return success_response(self._article_payload(article), message='Article updated successfully')

    def destroy(self, request, pk=None):
        article = self.get_object()
        self.engine.delete_article(request.user, article)
        return success_response(message='Article deleted successfully')

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    @action(detail=True, methods=['post'])
    def transition(self, request, pk=None):
        article = self.get_object()
        serializer = TransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        article = self.engine.request_transition(
            request.user,
            article,
            serializer.validated_data['status'],
            note=serializer.validated_data['note'],
        )
        payload = self._article_payload(article)
        payload['allowed_transitions'] = [
            status.value for status in allowed_targets(article.status, get_user_role(request.user))
        ]
        return success_response(payload, message=f"Article is now {article.status}")

    @action(detail=True, methods=['get'])
    def transitions(self, request, pk=None):
        article = self.get_object()
        return success_response({
            'current': article.status,
            'allowed': [
                status.value for status in allowed_targets(article.status, get_user_role(request.user))
            ],
        })

    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        article = self.get_object()
        changes = article.status_changes.select_related('changed_by').order_by('created_at')
        return success_response({
            'history': ArticleStatusChangeSerializer(changes, many=True).data,
        })

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @action(detail=False, methods=['get'], url_path=r'slug/(?P<slug>[^/]+)')
    def by_slug(self, request, slug=None):
        article = services.get_visible_article(request.user, slug=slug)
        services.increment_view_count(article)
        return success_response(self._article_payload(article))

    @action(detail=True, methods=['get'])
    def related(self, request, pk=None):
        article = self.get_object()
        limit = _bounded_int(request.query_params, 'limit', 4, MAX_RELATED)
        articles = services.related_articles(article, limit=limit)
        return success_response({
            'articles': ArticleListSerializer(articles, many=True).data,
        })

    @action(detail=False, methods=['get'])
    def trending(self, request):
        limit = _bounded_int(request.query_params, 'limit', 5, MAX_TRENDING)
        days = _bounded_int(request.query_params, 'days', 7, MAX_TRENDING_DAYS)
        articles = services.trending_articles(days=days, limit=limit)
        return success_response({
            'articles': ArticleListSerializer(articles, many=True).data,
        })
