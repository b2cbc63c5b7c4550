"""
Category article-count maintenance.

Counters are adjusted with F() expressions inside the caller's transaction,
never read-modify-write. A decrement that would take a counter below zero
is refused and logged as drift; the daily recount repairs it.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from django.db import transaction
from django.db.models import F

from apps.articles.workflow import ArticleStatus

from .models import Category

logger = logging.getLogger(__name__)


def counter_deltas(
    was_published: bool,
    old_category_id,
    is_published: bool,
    new_category_id,
) -> Dict[object, int]:
    """
    Compute per-category counter changes for one article write.

    -1 on the category being left if the article was PUBLISHED, +1 on the
    category being entered if it is PUBLISHED afterwards. Entries that net
    to zero are dropped.
    """
    deltas = defaultdict(int)
    if was_published and old_category_id is not None:
        deltas[old_category_id] -= 1
    if is_published and new_category_id is not None:
        deltas[new_category_id] += 1
    return {category_id: delta for category_id, delta in deltas.items() if delta}


def apply_deltas(deltas: Dict[object, int]) -> None:
    """Apply counter deltas. Call inside the article write's transaction."""
    # Rows are touched in a stable order across writers
    for category_id, delta in sorted(deltas.items(), key=lambda item: str(item[0])):
        queryset = Category.objects.filter(pk=category_id)
        if delta < 0:
            queryset = queryset.filter(article_count__gte=-delta)

        updated = queryset.update(article_count=F('article_count') + delta)
        if not updated:
            logger.warning(
                "Category counter drift: refused delta %+d on category %s",
                delta, category_id,
            )


def published_count(category: Category) -> int:
    from apps.articles.models import Article

    return Article.objects.filter(
        category=category,
        status=ArticleStatus.PUBLISHED.value,
    ).count()


def recount(category: Category) -> int:
    """
    Recompute article_count from PUBLISHED rows.

    Returns the drift corrected (actual minus stored).
    """
    with transaction.atomic():
        locked = Category.objects.select_for_update().get(pk=category.pk)
        actual = published_count(locked)
        drift = actual - locked.article_count
        if drift:
            Category.objects.filter(pk=locked.pk).update(article_count=actual)
            logger.warning(
                "Recount corrected category %s (%s): %d -> %d",
                locked.slug, locked.pk, locked.article_count, actual,
            )

    category.article_count = actual
    return drift


def recount_all(slugs: Optional[List[str]] = None) -> List[Tuple[Category, int]]:
    """Recount every category (or the given slugs); return those that drifted."""
    queryset = Category.objects.all()
    if slugs:
        queryset = queryset.filter(slug__in=slugs)

    drifted = []
    for category in queryset.iterator():
        drift = recount(category)
        if drift:
            drifted.append((category, drift))
    return drifted
