"""
Shared pytest fixtures: staff users per role, API clients, categories and
an article factory that keeps category counters consistent.
"""

import itertools

import pytest
from django.contrib.auth import get_user_model
from django.db.models import F
from django.utils import timezone
from rest_framework.test import APIClient

from apps.articles.models import Article, build_tag_index, normalize_tags
from apps.articles.workflow import ArticleStatus
from apps.categories.models import Category
from apps.core.roles import Role

User = get_user_model()

_slug_counter = itertools.count(1)


# ============================================================================
# Users
# ============================================================================

def _make_staff(username, role):
    user = User.objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password='testpass123',
    )
    user.staff_profile.role = role.value
    user.staff_profile.save()
    return user


@pytest.fixture
def reporter(db):
    return _make_staff('reporter', Role.REPORTER)


@pytest.fixture
def other_reporter(db):
    return _make_staff('reporter2', Role.REPORTER)


@pytest.fixture
def sub_editor(db):
    return _make_staff('subeditor', Role.SUB_EDITOR)


@pytest.fixture
def editor(db):
    return _make_staff('editor', Role.EDITOR)


@pytest.fixture
def admin(db):
    return _make_staff('admin', Role.ADMIN)


# ============================================================================
# Clients
# ============================================================================

@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def client_for():
    """Build an API client authenticated as the given user."""
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client


# ============================================================================
# Content
# ============================================================================

@pytest.fixture
def category(db):
    return Category.objects.create(name='Rajya', slug='rajya', color='#FF5722')


@pytest.fixture
def other_category(db):
    return Category.objects.create(name='Khel', slug='khel', color='#2196F3')


@pytest.fixture
def make_article(db):
    """
    Create an article directly, bypassing the workflow engine.

    PUBLISHED articles bump their category counter so fixtures start
    consistent.
    """
    def _make(author, category, status=ArticleStatus.DRAFT, title=None, tags=None, **extra):
        status = ArticleStatus(status)
        tags = normalize_tags(tags or [])
        n = next(_slug_counter)
        published = status == ArticleStatus.PUBLISHED
        article = Article.objects.create(
            title=title or f'Fixture article {n}',
            slug=extra.pop('slug', f'fixture-article-{n}'),
            content=extra.pop('content', 'Body text for the fixture article.'),
            tags=tags,
            tag_index=build_tag_index(tags),
            status=status.value,
            author=author,
            category=category,
            featured_image=extra.pop('featured_image', 'https://cdn.example.com/image.jpg'),
            published_at=extra.pop('published_at', timezone.now() if published else None),
            **extra,
        )
        if published:
            Category.objects.filter(pk=category.pk).update(article_count=F('article_count') + 1)
        return article
    return _make
