"""
Slug generation for articles.

The unique index on articles.slug is the source of truth. The lookup in
next_available_slug is only a hint; a write that loses the race raises
IntegrityError and is retried with the next free suffix.
"""

import logging
import re
from typing import Callable, Optional, TypeVar

from django.conf import settings
from django.db import IntegrityError, transaction

from apps.core.exceptions import SlugGenerationExhaustedError

from .models import Article

logger = logging.getLogger(__name__)

T = TypeVar('T')

SLUG_BASE_LENGTH = 100
FALLBACK_SLUG = 'article'

_DISALLOWED = re.compile(r'[^a-z0-9\s-]')
_WHITESPACE = re.compile(r'\s+')


def slug_candidate(title: str) -> str:
    """
    Lowercase, drop anything outside [a-z0-9 whitespace -], turn whitespace
    runs into single hyphens, cut to 100 characters.

    Titles with no ASCII letters or digits (e.g. pure Devanagari) fall back
    to "article".
    """
    base = _DISALLOWED.sub('', title.lower()).strip()
    base = _WHITESPACE.sub('-', base)[:SLUG_BASE_LENGTH]
    return base or FALLBACK_SLUG


def next_available_slug(base: str, exclude_pk=None) -> str:
    """First of base, base-1, base-2, ... not used by another article."""
    counter = 0
    while True:
        candidate = base if counter == 0 else f"{base}-{counter}"
        taken = Article.objects.filter(slug=candidate)
        if exclude_pk is not None:
            taken = taken.exclude(pk=exclude_pk)
        if not taken.exists():
            return candidate
        counter += 1


def _is_slug_violation(error: IntegrityError) -> bool:
    return 'slug' in str(error).lower()


def write_with_unique_slug(
    title: str,
    write: Callable[[str], T],
    exclude_pk=None,
    max_attempts: Optional[int] = None,
) -> T:
    """
    Call write(slug) until the slug sticks.

    Args:
        title: Source of the slug.
        write: Persists the row with the given slug; must raise IntegrityError
            if the slug is already taken.
        exclude_pk: Article whose own slug does not count as a collision.
        max_attempts: Defaults to settings.SLUG_MAX_WRITE_ATTEMPTS.

    Raises:
        SlugGenerationExhaustedError: every attempt hit the unique index.
    """
    max_attempts = max_attempts or settings.SLUG_MAX_WRITE_ATTEMPTS
    base = slug_candidate(title)

    for attempt in range(1, max_attempts + 1):
        slug = next_available_slug(base, exclude_pk=exclude_pk)
        try:
            with transaction.atomic():
                return write(slug)
        except IntegrityError as e:
            if not _is_slug_violation(e):
                raise
            logger.info(
                "Slug %s taken concurrently (attempt %d/%d)",
                slug, attempt, max_attempts,
            )

    logger.error("Slug generation exhausted for base %s after %d attempts", base, max_attempts)
    raise SlugGenerationExhaustedError(details={'base': base, 'attempts': max_attempts})
