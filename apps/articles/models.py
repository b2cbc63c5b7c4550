"""
Article models for the newsroom.

Status, published_at, version and the category counters move together and
are written only through apps.articles.engine.WorkflowEngine.
"""

from typing import Iterable, List

from django.conf import settings
from django.db import models

from apps.core.models import BaseModel

from .workflow import STATUS_CHOICES, ArticleStatus

SLUG_FIELD_LENGTH = 120
TAG_SEPARATOR = '|'


def normalize_tags(tags: Iterable[str]) -> List[str]:
    """Trim, lowercase and de-duplicate tags, keeping first-seen order."""
    seen = set()
    result = []
    for tag in tags or []:
        cleaned = str(tag).replace(TAG_SEPARATOR, ' ').strip().lower()
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            result.append(cleaned)
    return result


def build_tag_index(tags: Iterable[str]) -> str:
    """'|politics|indore|' form used for portable tag lookups."""
    tags = list(tags)
    if not tags:
        return ''
    return TAG_SEPARATOR + TAG_SEPARATOR.join(tags) + TAG_SEPARATOR


class Article(BaseModel):
    """
    A newsroom article moving through the editorial workflow.
    """

    title = models.CharField(
        max_length=200,
        verbose_name='Title',
        help_text='Headline'
    )

    slug = models.CharField(
        max_length=SLUG_FIELD_LENGTH,
        unique=True,
        verbose_name='Slug',
        help_text='Derived from the title; regenerated only when the title changes'
    )

    content = models.TextField(
        verbose_name='Content',
    )

    summary = models.JSONField(
        default=list,
        blank=True,
        help_text='Ordered list of summary bullets'
    )

    tags = models.JSONField(
        default=list,
        blank=True,
        help_text='Normalized tags (lowercase, unique)'
    )

    tag_index = models.TextField(
        blank=True,
        default='',
        editable=False,
        help_text='Delimited copy of tags for lookups'
    )

    seo = models.JSONField(
        default=dict,
        blank=True,
        help_text='{"title", "meta_description", "keywords"}'
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=ArticleStatus.DRAFT.value,
        db_index=True,
        verbose_name='Status',
    )

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='articles',
        verbose_name='Author',
    )

    category = models.ForeignKey(
        'categories.Category',
        on_delete=models.PROTECT,
        related_name='articles',
        verbose_name='Category',
    )

    featured_image = models.CharField(
        max_length=500,
        verbose_name='Featured Image',
        help_text='Image URL'
    )

    pdf_url = models.CharField(
        max_length=500,
        blank=True,
        default='',
        verbose_name='PDF URL',
    )

    published_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name='Published At',
        help_text='Set the first time the article is published; never cleared'
    )

    view_count = models.PositiveIntegerField(
        default=0,
        verbose_name='View Count',
    )

    version = models.PositiveIntegerField(
        default=1,
        editable=False,
        help_text='Optimistic-lock revision, bumped on every workflow write'
    )

    class Meta:
        db_table = 'articles'
        ordering = ['-published_at', '-created_at']
        indexes = [
            models.Index(fields=['status', '-published_at'], name='articles_status_pub_idx'),
            models.Index(fields=['category', 'status', '-published_at'], name='articles_cat_status_pub_idx'),
        ]
        verbose_name = 'Article'
        verbose_name_plural = 'Articles'

    def __str__(self):
        return f"{self.title[:50]} ({self.status})"

    @property
    def is_published(self):
        return self.status == ArticleStatus.PUBLISHED.value


class ArticleStatusChange(BaseModel):
    """
    Audit row written in the same transaction as each status change.
    from_status is null for the row recorded at creation.
    """

    article = models.ForeignKey(
        Article,
        on_delete=models.CASCADE,
        related_name='status_changes',
    )

    from_status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        null=True,
        blank=True,
    )

    to_status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
    )

    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='article_status_changes',
    )

    note = models.CharField(
        max_length=500,
        blank=True,
        default='',
    )

    class Meta:
        db_table = 'article_status_changes'
        ordering = ['created_at']
        verbose_name = 'Article Status Change'
        verbose_name_plural = 'Article Status Changes'

    def __str__(self):
        return f"{self.article_id}: {self.from_status} → {self.to_status}"
