"""
Tests for slug generation and unique-slug writes.
"""

from unittest.mock import patch

import pytest
from django.db import IntegrityError

from apps.articles.engine import WorkflowEngine
from apps.articles.models import Article
from apps.articles.slugs import (
    next_available_slug,
    slug_candidate,
    write_with_unique_slug,
)
from apps.core.exceptions import SlugGenerationExhaustedError


class TestSlugCandidate:

    @pytest.mark.parametrize('title,expected', [
        ('Indore Metro Update', 'indore-metro-update'),
        ('  Budget 2024: What Changes?  ', 'budget-2024-what-changes'),
        ('Multiple   spaces\tand\nlines', 'multiple-spaces-and-lines'),
        ('already-hyphenated title', 'already-hyphenated-title'),
        ('इंदौर मेट्रो', 'article'),
        ('!!!', 'article'),
    ])
    def test_candidate(self, title, expected):
        assert slug_candidate(title) == expected

    def test_mixed_script_keeps_ascii(self):
        assert slug_candidate('इंदौर Metro 2024') == 'metro-2024'

    def test_truncated_to_100(self):
        assert len(slug_candidate('a' * 300)) == 100


@pytest.mark.django_db
class TestNextAvailableSlug:

    def test_suffixes(self, reporter, category, make_article):
        assert next_available_slug('same-title') == 'same-title'
        make_article(reporter, category, slug='same-title')
        assert next_available_slug('same-title') == 'same-title-1'
        make_article(reporter, category, slug='same-title-1')
        assert next_available_slug('same-title') == 'same-title-2'

    def test_own_slug_is_not_a_collision(self, reporter, category, make_article):
        article = make_article(reporter, category, slug='mine')
        assert next_available_slug('mine', exclude_pk=article.pk) == 'mine'


@pytest.mark.django_db
class TestUniqueSlugWrites:

    def _data(self, category):
        return {
            'title': 'Same Title',
            'content': 'Body',
            'category': category,
            'featured_image': 'https://cdn.example.com/a.jpg',
        }

    def test_three_identical_titles(self, reporter, category):
        engine = WorkflowEngine()
        slugs = [engine.create_article(reporter, self._data(category)).slug for _ in range(3)]
        assert slugs == ['same-title', 'same-title-1', 'same-title-2']

    def test_lost_race_retries_with_next_suffix(self, reporter, category, make_article):
        """The lookup says the slug is free, but another writer took it."""
        make_article(reporter, category, slug='same-title')
        hints = iter(['same-title'])

        real_next = next_available_slug

        def racing_hint(base, exclude_pk=None):
            try:
                return next(hints)
            except StopIteration:
                return real_next(base, exclude_pk=exclude_pk)

        with patch('apps.articles.slugs.next_available_slug', side_effect=racing_hint):
            article = WorkflowEngine().create_article(reporter, self._data(category))

        assert article.slug == 'same-title-1'
        assert Article.objects.count() == 2

    def test_exhaustion(self, reporter, category, make_article):
        make_article(reporter, category, slug='same-title')

        with patch('apps.articles.slugs.next_available_slug', return_value='same-title'):
            with pytest.raises(SlugGenerationExhaustedError):
                WorkflowEngine().create_article(reporter, self._data(category))

        assert Article.objects.count() == 1

    def test_non_slug_integrity_error_propagates(self, db):
        def write(slug):
            raise IntegrityError('NOT NULL constraint failed: articles.title')

        with pytest.raises(IntegrityError):
            write_with_unique_slug('Anything', write)

    def test_exhaustion_respects_max_attempts(self, db):
        calls = []

        def write(slug):
            calls.append(slug)
            raise IntegrityError('UNIQUE constraint failed: articles.slug')

        with pytest.raises(SlugGenerationExhaustedError):
            write_with_unique_slug('Anything', write, max_attempts=2)
        assert calls == ['anything', 'anything']
