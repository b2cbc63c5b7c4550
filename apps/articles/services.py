"""
Article read services: visibility, filtering, related and trending lists,
view counting.
"""

import logging
import uuid
from datetime import timedelta
from functools import reduce
from operator import or_
from typing import Mapping

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import F, Q, QuerySet
from django.utils import timezone

from apps.core.exceptions import ArticleNotFoundError, ValidationError
from apps.core.permissions import get_user_role

from .models import TAG_SEPARATOR, Article
from .workflow import ArticleStatus

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ('published_at', 'created_at', 'view_count', 'title')
DEFAULT_SORT = 'published_at'
ALL_STATUSES = 'ALL'


def is_staff(user) -> bool:
    return get_user_role(user) is not None


def base_queryset() -> QuerySet:
    return Article.objects.select_related('author', 'category')


def visible_articles(user) -> QuerySet:
    """Staff see every status; everyone else sees PUBLISHED only."""
    queryset = base_queryset()
    if not is_staff(user):
        queryset = queryset.filter(status=ArticleStatus.PUBLISHED.value)
    return queryset


def get_visible_article(user, **lookup) -> Article:
    try:
        return visible_articles(user).get(**lookup)
    except (Article.DoesNotExist, DjangoValidationError, ValueError):
        raise ArticleNotFoundError()


def _status_filter(raw: str):
    values = [value.strip().upper() for value in raw.split(',') if value.strip()]
    statuses = []
    for value in values:
        try:
            statuses.append(ArticleStatus.from_string(value).value)
        except ValueError:
            raise ValidationError(f"Unknown status: {value}", field='status')
    return statuses


def filter_articles(user, params: Mapping[str, str]) -> QuerySet:
    """
    Apply list filters from query parameters.

    status      staff only; comma-separated, or ALL. Defaults to PUBLISHED.
    category    category UUID or slug
    tag         substring match against tags
    author      author user id
    search      title/content substring
    sort_by     published_at | created_at | view_count | title
    order       asc | desc (default desc)
    """
    queryset = base_queryset()

    status = (params.get('status') or '').strip()
    if is_staff(user) and status:
        if status.upper() != ALL_STATUSES:
            queryset = queryset.filter(status__in=_status_filter(status))
    else:
        queryset = queryset.filter(status=ArticleStatus.PUBLISHED.value)

    category = params.get('category')
    if category:
        category_pk = _uuid_or_none(category)
        if category_pk is not None:
            queryset = queryset.filter(category_id=category_pk)
        else:
            queryset = queryset.filter(category__slug=category)

    tag = (params.get('tag') or '').strip().lower()
    if tag:
        queryset = queryset.filter(tag_index__icontains=tag)

    author = params.get('author')
    if author:
        if not str(author).isdigit():
            raise ValidationError("author must be a user id", field='author')
        queryset = queryset.filter(author_id=int(author))

    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(Q(title__icontains=search) | Q(content__icontains=search))

    sort_by = params.get('sort_by') or DEFAULT_SORT
    if sort_by not in SORTABLE_FIELDS:
        raise ValidationError(
            f"sort_by must be one of {', '.join(SORTABLE_FIELDS)}",
            field='sort_by',
        )
    descending = (params.get('order') or 'desc').lower() != 'asc'
    ordering = F(sort_by).desc(nulls_last=True) if descending else F(sort_by).asc(nulls_last=True)
    return queryset.order_by(ordering, '-created_at')


def _uuid_or_none(value):
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def related_articles(article: Article, limit: int = 4) -> QuerySet:
    """PUBLISHED articles sharing the category or any tag, newest first."""
    match = Q(category_id=article.category_id)
    if article.tags:
        match |= reduce(or_, (
            Q(tag_index__contains=f"{TAG_SEPARATOR}{tag}{TAG_SEPARATOR}")
            for tag in article.tags
        ))
    return (
        base_queryset()
        .filter(match, status=ArticleStatus.PUBLISHED.value)
        .exclude(pk=article.pk)
        .order_by(F('published_at').desc(nulls_last=True))[:limit]
    )


def trending_articles(days: int = 7, limit: int = 5) -> QuerySet:
    """Most viewed PUBLISHED articles published within the last `days` days."""
    since = timezone.now() - timedelta(days=days)
    return (
        base_queryset()
        .filter(status=ArticleStatus.PUBLISHED.value, published_at__gte=since)
        .order_by('-view_count', F('published_at').desc(nulls_last=True))[:limit]
    )


def increment_view_count(article: Article) -> None:
    """Atomic +1 for PUBLISHED articles; not a workflow write, so no version bump."""
    if not article.is_published:
        return
    Article.objects.filter(pk=article.pk).update(view_count=F('view_count') + 1)
    article.view_count += 1
