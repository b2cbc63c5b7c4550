"""
Article Workflow Engine.

Every write that can change an article's status, category or title goes
through here so that status, published_at, slug, version, the category
counters and the status history always move together.

Each write is an UPDATE guarded by the article's version column inside
transaction.atomic(). When another writer got there first the update
matches zero rows, the transaction is rolled back, and the engine reloads
the article and re-validates the request against the fresh state, up to
WORKFLOW_MAX_WRITE_ATTEMPTS times.

Usage:
    engine = WorkflowEngine()
    article = engine.request_transition(request.user, article, ArticleStatus.PUBLISHED)
    article = engine.update_article(request.user, article, {'title': 'New'}, target_status=None)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.categories.counters import apply_deltas, counter_deltas
from apps.categories.models import Category
from apps.categories.services import get_category
from apps.core.exceptions import (
    ArticleNotFoundError,
    ConcurrentModificationError,
    ForbiddenError,
)
from apps.core.permissions import can_modify_article, get_user_role

from .models import Article, ArticleStatusChange, build_tag_index, normalize_tags
from .slugs import write_with_unique_slug
from .workflow import ArticleStatus, check_transition

logger = logging.getLogger(__name__)

# Fields a content edit may touch
EDITABLE_FIELDS = (
    'title',
    'content',
    'summary',
    'tags',
    'seo',
    'featured_image',
    'pdf_url',
    'category',
)


class _VersionConflict(Exception):
    """The guarded UPDATE matched no row."""


@dataclass
class WritePlan:
    """Column values and side effects for one guarded article write."""
    fields: Dict[str, Any] = field(default_factory=dict)
    deltas: Dict[Any, int] = field(default_factory=dict)
    from_status: Optional[str] = None
    to_status: Optional[str] = None
    new_title: Optional[str] = None

    @property
    def changes_status(self) -> bool:
        return self.to_status is not None


def _as_status(value) -> Optional[ArticleStatus]:
    if value is None or isinstance(value, ArticleStatus):
        return value
    return ArticleStatus.from_string(value)


def _resolve_category(value) -> Category:
    if isinstance(value, Category):
        return value
    return get_category(value)


class WorkflowEngine:
    """
    Validates and applies article writes.

    Graph and authority failures are raised immediately and never retried.
    Version conflicts are retried internally before surfacing as
    ConcurrentModificationError.
    """

    def __init__(self, max_attempts: Optional[int] = None):
        self.max_attempts = max_attempts or settings.WORKFLOW_MAX_WRITE_ATTEMPTS

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load(self, article_id) -> Article:
        """Fresh snapshot of the article row used to plan a write."""
        try:
            return Article.objects.get(pk=article_id)
        except Article.DoesNotExist:
            raise ArticleNotFoundError()

    def _refresh(self, article_id) -> Article:
        return Article.objects.select_related('author', 'category').get(pk=article_id)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def request_transition(self, actor, article: Article, target_status, note: str = '') -> Article:
        """
        Move an article to target_status.

        Requesting the current status is a no-op: nothing is written and the
        version does not change.
        """
        return self.update_article(actor, article, {}, target_status=target_status, note=note)

    def update_article(
        self,
        actor,
        article: Article,
        changes: Dict[str, Any],
        target_status=None,
        note: str = '',
    ) -> Article:
        """
        Apply content edits and an optional status change in one write.

        Content edits require the author or an EDITOR/ADMIN; a status-only
        request requires only transition authority.
        """
        role = get_user_role(actor)
        target = _as_status(target_status)
        changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        if 'category' in changes:
            changes['category'] = _resolve_category(changes['category'])
        if 'tags' in changes:
            changes['tags'] = normalize_tags(changes['tags'])

        for attempt in range(1, self.max_attempts + 1):
            current = self._load(article.pk)
            plan = self._plan(actor, role, current, changes, target)
            if plan is None:
                logger.debug("No-op write on article %s", current.pk)
                return current

            try:
                self._commit(actor, current, plan, note)
            except _VersionConflict:
                logger.info(
                    "Version conflict on article %s at v%d (attempt %d/%d)",
                    current.pk, current.version, attempt, self.max_attempts,
                )
                continue

            if plan.changes_status:
                logger.info(
                    "Article %s: %s -> %s by user %s",
                    current.pk, plan.from_status, plan.to_status, getattr(actor, 'pk', None),
                )
            return self._refresh(current.pk)

        logger.warning(
            "Article %s: giving up after %d conflicting writes",
            article.pk, self.max_attempts,
        )
        raise ConcurrentModificationError(
            details={'article_id': str(article.pk), 'attempts': self.max_attempts},
        )

    def create_article(self, actor, data: Dict[str, Any], initial_status=None, note: str = '') -> Article:
        """
        Create an article in DRAFT.

        A requested initial status other than DRAFT is validated as a
        transition out of DRAFT and recorded in the history.
        """
        role = get_user_role(actor)
        if role is None:
            raise ForbiddenError("Authentication required to create articles")

        category = _resolve_category(data['category'])
        target = _as_status(initial_status) or ArticleStatus.DRAFT
        if target != ArticleStatus.DRAFT:
            check_transition(ArticleStatus.DRAFT, target, role)
        # PUBLISHED is unreachable from DRAFT, so creation never moves a category counter.

        tags = normalize_tags(data.get('tags') or [])

        def write(slug: str) -> Article:
            with transaction.atomic():
                article = Article.objects.create(
                    title=data['title'],
                    slug=slug,
                    content=data['content'],
                    summary=list(data.get('summary') or []),
                    tags=tags,
                    tag_index=build_tag_index(tags),
                    seo=dict(data.get('seo') or {}),
                    status=target.value,
                    author=actor,
                    category=category,
                    featured_image=data['featured_image'],
                    pdf_url=data.get('pdf_url') or '',
                )
                ArticleStatusChange.objects.create(
                    article=article,
                    from_status=None,
                    to_status=ArticleStatus.DRAFT.value,
                    changed_by=actor,
                    note='Created',
                )
                if target != ArticleStatus.DRAFT:
                    ArticleStatusChange.objects.create(
                        article=article,
                        from_status=ArticleStatus.DRAFT.value,
                        to_status=target.value,
                        changed_by=actor,
                        note=note,
                    )
            return article

        article = write_with_unique_slug(data['title'], write)
        logger.info("Article %s created by user %s as %s", article.pk, actor.pk, article.status)
        return self._refresh(article.pk)

    def delete_article(self, actor, article: Article) -> None:
        """Delete an article, reversing its counter contribution if PUBLISHED."""
        for attempt in range(1, self.max_attempts + 1):
            current = self._load(article.pk)
            if not can_modify_article(actor, current):
                raise ForbiddenError("Not authorized to delete this article")

            with transaction.atomic():
                _, per_model = Article.objects.filter(
                    pk=current.pk,
                    version=current.version,
                ).delete()
                if per_model.get(Article._meta.label, 0):
                    apply_deltas(counter_deltas(
                        current.is_published, current.category_id, False, None,
                    ))
                    logger.info("Article %s deleted by user %s", current.pk, actor.pk)
                    return

            logger.info(
                "Version conflict deleting article %s (attempt %d/%d)",
                current.pk, attempt, self.max_attempts,
            )

        raise ConcurrentModificationError(
            details={'article_id': str(article.pk), 'attempts': self.max_attempts},
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _plan(self, actor, role, current: Article, changes: Dict[str, Any], target) -> Optional[WritePlan]:
        """Validate the request against current and describe the write, or None for a no-op."""
        status_change = target is not None and target.value != current.status

        content = {}
        for name, value in changes.items():
            if name == 'category':
                if value.pk != current.category_id:
                    content[name] = value
            elif getattr(current, name) != value:
                content[name] = value

        if not status_change and not content:
            return None

        if status_change:
            check_transition(current.status, target, role)

        if content and not can_modify_article(actor, current):
            raise ForbiddenError("Not authorized to update this article")

        plan = WritePlan()
        new_status = target.value if status_change else current.status
        new_category_id = content['category'].pk if 'category' in content else current.category_id

        for name, value in content.items():
            if name == 'category':
                plan.fields['category_id'] = value.pk
            elif name == 'tags':
                plan.fields['tags'] = value
                plan.fields['tag_index'] = build_tag_index(value)
            else:
                plan.fields[name] = value

        if 'title' in content:
            plan.new_title = content['title']

        if status_change:
            plan.from_status = current.status
            plan.to_status = new_status
            plan.fields['status'] = new_status
            if new_status == ArticleStatus.PUBLISHED.value and current.published_at is None:
                plan.fields['published_at'] = timezone.now()

        plan.deltas = counter_deltas(
            current.status == ArticleStatus.PUBLISHED.value,
            current.category_id,
            new_status == ArticleStatus.PUBLISHED.value,
            new_category_id,
        )
        return plan

    def _commit(self, actor, current: Article, plan: WritePlan, note: str) -> None:
        """Guarded write of article row, counters and history; all or nothing."""

        def write(slug: Optional[str] = None) -> None:
            with transaction.atomic():
                fields = dict(plan.fields)
                if slug is not None:
                    fields['slug'] = slug

                updated = Article.objects.filter(
                    pk=current.pk,
                    version=current.version,
                ).update(
                    version=F('version') + 1,
                    updated_at=timezone.now(),
                    **fields,
                )
                if not updated:
                    raise _VersionConflict()

                apply_deltas(plan.deltas)

                if plan.changes_status:
                    ArticleStatusChange.objects.create(
                        article_id=current.pk,
                        from_status=plan.from_status,
                        to_status=plan.to_status,
                        changed_by=actor,
                        note=note,
                    )

        if plan.new_title is not None:
            write_with_unique_slug(plan.new_title, write, exclude_pk=current.pk)
        else:
            write()
