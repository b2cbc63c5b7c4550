"""
Tests for WorkflowEngine: transitions, counters, authority, history and
optimistic-lock retries.
"""

from unittest.mock import patch

import pytest

from apps.articles.engine import WorkflowEngine
from apps.articles.models import Article, ArticleStatusChange
from apps.articles.workflow import ArticleStatus
from apps.categories.models import Category
from apps.core.exceptions import (
    ConcurrentModificationError,
    ForbiddenError,
    InvalidTransitionError,
)

S = ArticleStatus

pytestmark = pytest.mark.django_db


@pytest.fixture
def engine():
    return WorkflowEngine(max_attempts=3)


def _count(category):
    return Category.objects.get(pk=category.pk).article_count


def _stale(article):
    """In-memory copy of the row as it is now."""
    return Article.objects.get(pk=article.pk)


# ============================================================================
# Transitions and counters
# ============================================================================

class TestTransitions:

    def test_publish_sets_published_at_and_bumps_counter(self, engine, editor, reporter, category, make_article):
        article = make_article(reporter, category, status=S.EDITOR_APPROVED)
        assert _count(category) == 0

        result = engine.request_transition(editor, article, S.PUBLISHED)

        assert result.status == S.PUBLISHED.value
        assert result.published_at is not None
        assert result.version == 2
        assert _count(category) == 1

    def test_unpublish_decrements_and_keeps_published_at(self, engine, editor, reporter, category, make_article):
        article = make_article(reporter, category, status=S.PUBLISHED)
        published_at = article.published_at
        assert _count(category) == 1

        result = engine.request_transition(editor, article, S.DRAFT)

        assert result.status == S.DRAFT.value
        assert result.published_at == published_at
        assert _count(category) == 0

    def test_republish_keeps_first_published_at(self, engine, editor, reporter, category, make_article):
        article = make_article(reporter, category, status=S.PUBLISHED)
        first = article.published_at

        engine.request_transition(editor, article, S.ARCHIVED)
        engine.request_transition(editor, article, S.DRAFT)
        engine.request_transition(reporter, article, S.SUB_EDITOR_REVIEW)
        engine.request_transition(editor, article, S.EDITOR_APPROVED)
        result = engine.request_transition(editor, article, S.PUBLISHED)

        assert result.published_at == first
        assert _count(category) == 1

    def test_archive_decrements(self, engine, editor, reporter, category, make_article):
        article = make_article(reporter, category, status=S.PUBLISHED)
        engine.request_transition(editor, article, S.ARCHIVED)
        assert _count(category) == 0

    def test_same_status_is_noop(self, engine, editor, reporter, category, make_article):
        article = make_article(reporter, category, status=S.PUBLISHED)

        result = engine.request_transition(editor, article, S.PUBLISHED)

        assert result.version == 1
        assert _count(category) == 1
        assert not ArticleStatusChange.objects.filter(article=article).exists()

    def test_same_status_noop_even_without_authority(self, engine, reporter, category, make_article):
        article = make_article(reporter, category, status=S.PUBLISHED)
        result = engine.request_transition(reporter, article, S.PUBLISHED)
        assert result.version == 1

    def test_transition_writes_history(self, engine, reporter, category, make_article):
        article = make_article(reporter, category)

        engine.request_transition(reporter, article, S.SUB_EDITOR_REVIEW, note='Ready')

        change = ArticleStatusChange.objects.get(article=article)
        assert change.from_status == S.DRAFT.value
        assert change.to_status == S.SUB_EDITOR_REVIEW.value
        assert change.changed_by == reporter
        assert change.note == 'Ready'


class TestRejections:

    def test_reporter_cannot_approve(self, engine, reporter, category, make_article):
        article = make_article(reporter, category, status=S.SUB_EDITOR_REVIEW)
        with pytest.raises(ForbiddenError):
            engine.request_transition(reporter, article, S.EDITOR_APPROVED)

    def test_sub_editor_approves(self, engine, sub_editor, reporter, category, make_article):
        article = make_article(reporter, category, status=S.SUB_EDITOR_REVIEW)
        result = engine.request_transition(sub_editor, article, S.EDITOR_APPROVED)
        assert result.status == S.EDITOR_APPROVED.value

    def test_reporter_cannot_publish(self, engine, reporter, category, make_article):
        article = make_article(reporter, category, status=S.EDITOR_APPROVED)

        with pytest.raises(ForbiddenError):
            engine.request_transition(reporter, article, S.PUBLISHED)

        article.refresh_from_db()
        assert article.status == S.EDITOR_APPROVED.value
        assert article.version == 1
        assert _count(category) == 0

    def test_skipping_review_is_invalid(self, engine, admin, reporter, category, make_article):
        article = make_article(reporter, category)

        with pytest.raises(InvalidTransitionError):
            engine.request_transition(admin, article, S.PUBLISHED)

        article.refresh_from_db()
        assert article.status == S.DRAFT.value
        assert article.published_at is None

    def test_other_reporter_cannot_edit_content(self, engine, reporter, other_reporter, category, make_article):
        article = make_article(reporter, category)

        with pytest.raises(ForbiddenError):
            engine.update_article(other_reporter, article, {'title': 'Hijacked'})

    def test_other_reporter_may_submit_for_review(self, engine, reporter, other_reporter, category, make_article):
        article = make_article(reporter, category)
        result = engine.request_transition(other_reporter, article, S.SUB_EDITOR_REVIEW)
        assert result.status == S.SUB_EDITOR_REVIEW.value

    def test_editor_may_edit_any_article(self, engine, editor, reporter, category, make_article):
        article = make_article(reporter, category)
        result = engine.update_article(editor, article, {'content': 'Edited by desk'})
        assert result.content == 'Edited by desk'


# ============================================================================
# Content edits
# ============================================================================

class TestUpdates:

    def test_category_reassignment_moves_counter(self, engine, editor, reporter, category, other_category, make_article):
        article = make_article(reporter, category, status=S.PUBLISHED)

        result = engine.update_article(editor, article, {'category': other_category.slug})

        assert result.category_id == other_category.pk
        assert _count(category) == 0
        assert _count(other_category) == 1

    def test_reassigning_draft_leaves_counters(self, engine, reporter, category, other_category, make_article):
        article = make_article(reporter, category)
        engine.update_article(reporter, article, {'category': str(other_category.pk)})
        assert _count(category) == 0
        assert _count(other_category) == 0

    def test_edit_and_publish_together(self, engine, editor, reporter, category, other_category, make_article):
        article = make_article(reporter, category, status=S.EDITOR_APPROVED)

        result = engine.update_article(
            editor, article, {'category': other_category}, target_status=S.PUBLISHED,
        )

        assert result.status == S.PUBLISHED.value
        assert _count(category) == 0
        assert _count(other_category) == 1
        assert result.version == 2

    def test_title_change_regenerates_slug(self, engine, reporter, category, make_article):
        article = make_article(reporter, category, title='Old headline', slug='old-headline')

        result = engine.update_article(reporter, article, {'title': 'New Headline Here'})

        assert result.slug == 'new-headline-here'

    def test_other_edits_keep_slug(self, engine, reporter, category, make_article):
        article = make_article(reporter, category, title='Stable', slug='stable')
        result = engine.update_article(reporter, article, {'content': 'Changed body'})
        assert result.slug == 'stable'

    def test_tags_are_normalized_and_indexed(self, engine, reporter, category, make_article):
        article = make_article(reporter, category)

        result = engine.update_article(reporter, article, {'tags': [' Indore ', 'indore', 'Politics']})

        assert result.tags == ['indore', 'politics']
        assert result.tag_index == '|indore|politics|'

    def test_unchanged_values_are_noop(self, engine, reporter, category, make_article):
        article = make_article(reporter, category, title='Same')
        result = engine.update_article(reporter, article, {'title': 'Same'})
        assert result.version == 1


# ============================================================================
# Create and delete
# ============================================================================

class TestCreateDelete:

    def _data(self, category, **overrides):
        data = {
            'title': 'Indore Metro Update',
            'content': 'The metro trial run began today.',
            'category': category.slug,
            'featured_image': 'https://cdn.example.com/metro.jpg',
            'tags': ['Metro', 'Indore'],
        }
        data.update(overrides)
        return data

    def test_create_starts_in_draft(self, engine, reporter, category):
        article = engine.create_article(reporter, self._data(category))

        assert article.status == S.DRAFT.value
        assert article.slug == 'indore-metro-update'
        assert article.author == reporter
        assert article.version == 1
        assert article.tags == ['metro', 'indore']
        assert _count(category) == 0
        history = list(article.status_changes.values_list('from_status', 'to_status'))
        assert history == [(None, S.DRAFT.value)]

    def test_create_with_review_status(self, engine, reporter, category):
        article = engine.create_article(
            reporter, self._data(category), initial_status=S.SUB_EDITOR_REVIEW,
        )
        assert article.status == S.SUB_EDITOR_REVIEW.value
        assert article.status_changes.count() == 2
        assert article.published_at is None
        assert _count(category) == 0

    def test_create_cannot_skip_review(self, engine, admin, category):
        with pytest.raises(InvalidTransitionError):
            engine.create_article(admin, self._data(category), initial_status=S.PUBLISHED)
        assert not Article.objects.exists()

    def test_delete_published_decrements(self, engine, reporter, category, make_article):
        article = make_article(reporter, category, status=S.PUBLISHED)

        engine.delete_article(reporter, article)

        assert not Article.objects.filter(pk=article.pk).exists()
        assert _count(category) == 0

    def test_delete_by_stranger_is_forbidden(self, engine, reporter, other_reporter, category, make_article):
        article = make_article(reporter, category)
        with pytest.raises(ForbiddenError):
            engine.delete_article(other_reporter, article)
        assert Article.objects.filter(pk=article.pk).exists()


# ============================================================================
# Optimistic locking
# ============================================================================

class TestConcurrency:

    def test_stale_snapshot_is_retried(self, engine, editor, reporter, category, make_article):
        article = make_article(reporter, category, status=S.EDITOR_APPROVED)
        stale = _stale(article)
        # Another writer edits the body first
        Article.objects.filter(pk=article.pk).update(content='Concurrent edit', version=2)

        real_load = WorkflowEngine._load
        snapshots = iter([stale])

        def load(self, article_id):
            try:
                return next(snapshots)
            except StopIteration:
                return real_load(self, article_id)

        with patch.object(WorkflowEngine, '_load', load):
            result = engine.request_transition(editor, article, S.PUBLISHED)

        assert result.status == S.PUBLISHED.value
        assert result.content == 'Concurrent edit'
        assert result.version == 3
        assert _count(category) == 1
        assert article.status_changes.count() == 1

    def test_retry_revalidates_against_fresh_state(self, engine, editor, reporter, category, make_article):
        """The concurrent writer already published; the retry sees a no-op."""
        article = make_article(reporter, category, status=S.EDITOR_APPROVED)
        stale = _stale(article)
        engine.request_transition(editor, article, S.PUBLISHED)

        real_load = WorkflowEngine._load
        snapshots = iter([stale])

        def load(self, article_id):
            try:
                return next(snapshots)
            except StopIteration:
                return real_load(self, article_id)

        with patch.object(WorkflowEngine, '_load', load):
            result = engine.request_transition(editor, article, S.PUBLISHED)

        assert result.version == 2
        assert _count(category) == 1

    def test_gives_up_after_max_attempts(self, engine, editor, reporter, category, make_article):
        article = make_article(reporter, category, status=S.EDITOR_APPROVED)
        stale = _stale(article)
        Article.objects.filter(pk=article.pk).update(version=5)

        with patch.object(WorkflowEngine, '_load', return_value=stale) as load:
            with pytest.raises(ConcurrentModificationError):
                engine.request_transition(editor, article, S.PUBLISHED)

        assert load.call_count == 3
        article.refresh_from_db()
        assert article.status == S.EDITOR_APPROVED.value
        assert _count(category) == 0
        assert not ArticleStatusChange.objects.filter(article=article).exists()

    def test_delete_with_stale_version_gives_up(self, engine, reporter, category, make_article):
        article = make_article(reporter, category, status=S.PUBLISHED)
        stale = _stale(article)
        Article.objects.filter(pk=article.pk).update(version=9)

        with patch.object(WorkflowEngine, '_load', return_value=stale):
            with pytest.raises(ConcurrentModificationError):
                engine.delete_article(reporter, article)

        assert Article.objects.filter(pk=article.pk).exists()
        assert _count(category) == 1


# ============================================================================
# Counter invariant
# ============================================================================

def test_counters_match_published_rows_after_mixed_sequence(
    engine, editor, reporter, category, other_category, make_article,
):
    first = make_article(reporter, category, status=S.EDITOR_APPROVED)
    second = make_article(reporter, other_category, status=S.PUBLISHED)
    third = make_article(reporter, category, status=S.PUBLISHED)

    engine.request_transition(editor, first, S.PUBLISHED)
    engine.update_article(editor, second, {'category': category})
    engine.request_transition(editor, third, S.ARCHIVED)
    engine.request_transition(editor, third, S.DRAFT)
    engine.update_article(editor, first, {'category': other_category}, target_status=S.DRAFT)
    engine.request_transition(editor, second, S.PUBLISHED)
    engine.delete_article(editor, second)

    for cat in (category, other_category):
        published = Article.objects.filter(category=cat, status=S.PUBLISHED.value).count()
        assert _count(cat) == published
