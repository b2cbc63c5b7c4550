"""
Tests for category counter deltas, drift handling and recounts.
"""

import uuid
from unittest.mock import patch

import pytest
from django.core.management import call_command

from apps.articles.models import Article
from apps.articles.workflow import ArticleStatus
from apps.categories.counters import apply_deltas, counter_deltas, recount, recount_all
from apps.categories.models import Category
from apps.categories.tasks import reconcile_category_counts

S = ArticleStatus

A = uuid.uuid4()
B = uuid.uuid4()


class TestCounterDeltas:

    @pytest.mark.parametrize('was,old,now,new,expected', [
        (False, A, True, A, {A: 1}),
        (True, A, False, A, {A: -1}),
        (True, A, True, A, {}),
        (False, A, False, B, {}),
        (True, A, True, B, {A: -1, B: 1}),
        (True, A, False, B, {A: -1}),
        (False, None, True, A, {A: 1}),
        (True, A, False, None, {A: -1}),
    ])
    def test_deltas(self, was, old, now, new, expected):
        assert counter_deltas(was, old, now, new) == expected


@pytest.mark.django_db
class TestApplyDeltas:

    def test_increment_and_decrement(self, category, other_category):
        apply_deltas({category.pk: 1, other_category.pk: 2})
        apply_deltas({other_category.pk: -1})

        category.refresh_from_db()
        other_category.refresh_from_db()
        assert category.article_count == 1
        assert other_category.article_count == 1

    def test_refuses_to_go_negative(self, category):
        with patch('apps.categories.counters.logger') as logger:
            apply_deltas({category.pk: -1})

        category.refresh_from_db()
        assert category.article_count == 0
        assert logger.warning.called


@pytest.mark.django_db
class TestRecount:

    def test_recount_repairs_drift(self, reporter, category, make_article):
        make_article(reporter, category, status=S.PUBLISHED)
        make_article(reporter, category, status=S.PUBLISHED)
        make_article(reporter, category)
        Category.objects.filter(pk=category.pk).update(article_count=7)

        drift = recount(category)

        assert drift == -5
        assert Category.objects.get(pk=category.pk).article_count == 2

    def test_recount_consistent_is_zero(self, reporter, category, make_article):
        make_article(reporter, category, status=S.PUBLISHED)
        assert recount(category) == 0

    def test_recount_all_reports_only_drifted(self, reporter, category, other_category, make_article):
        make_article(reporter, category, status=S.PUBLISHED)
        # Published behind the counter's back
        Article.objects.create(
            title='Sneaky', slug='sneaky', content='x', status=S.PUBLISHED.value,
            author=reporter, category=other_category, featured_image='https://cdn.example.com/s.jpg',
        )

        drifted = recount_all()

        assert [(c.slug, d) for c, d in drifted] == [('khel', 1)]

    def test_task_returns_drift(self, reporter, other_category):
        Article.objects.create(
            title='Sneaky', slug='sneaky', content='x', status=S.PUBLISHED.value,
            author=reporter, category=other_category, featured_image='https://cdn.example.com/s.jpg',
        )

        result = reconcile_category_counts.apply().get()

        assert result == {'drifted': {'khel': 1}}
        assert Category.objects.get(pk=other_category.pk).article_count == 1

    def test_command_dry_run_does_not_write(self, category, capsys):
        Category.objects.filter(pk=category.pk).update(article_count=4)

        call_command('recount_categories', '--dry-run')

        assert 'rajya: stored 4, actual 0' in capsys.readouterr().out
        assert Category.objects.get(pk=category.pk).article_count == 4

    def test_command_recounts_selected(self, category, other_category, capsys):
        Category.objects.filter(pk__in=[category.pk, other_category.pk]).update(article_count=4)

        call_command('recount_categories', '--slug', 'rajya')

        assert 'rajya: corrected by -4' in capsys.readouterr().out
        assert Category.objects.get(pk=category.pk).article_count == 0
        assert Category.objects.get(pk=other_category.pk).article_count == 4
