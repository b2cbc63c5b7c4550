"""
Category lifecycle: create, update, guarded delete.
"""

import logging
import uuid

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from apps.core.exceptions import (
    CategoryInUseError,
    CategoryNotFoundError,
    DuplicateError,
)

from .models import Category

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('name', 'description', 'color')


def get_category(lookup) -> Category:
    """Resolve a category by UUID or slug."""
    try:
        pk = uuid.UUID(str(lookup))
    except ValueError:
        queryset = Category.objects.filter(slug=str(lookup).lower())
    else:
        queryset = Category.objects.filter(pk=pk)

    category = queryset.first()
    if category is None:
        raise CategoryNotFoundError()
    return category


def create_category(*, name: str, slug: str, color: str, description: str = '') -> Category:
    slug = slug.lower()
    if Category.objects.filter(slug=slug).exists():
        raise DuplicateError("Category with this slug already exists", field='slug')

    try:
        with transaction.atomic():
            category = Category.objects.create(
                name=name,
                slug=slug,
                description=description,
                color=color,
            )
    except IntegrityError:
        raise DuplicateError("Category with this slug already exists", field='slug')

    logger.info("Created category %s (%s)", category.slug, category.pk)
    return category


def update_category(category: Category, changes: dict) -> Category:
    """Apply name/description/color changes. Slug and count are immutable here."""
    update_fields = []
    for field_name in UPDATABLE_FIELDS:
        if field_name in changes:
            setattr(category, field_name, changes[field_name])
            update_fields.append(field_name)

    if update_fields:
        category.save(update_fields=update_fields + ['updated_at'])
        logger.info("Updated category %s: %s", category.slug, ', '.join(update_fields))
    return category


def delete_category(category: Category) -> None:
    """
    Delete a category that no article references.

    Raises CategoryInUseError while article_count > 0, and also when
    unpublished articles still point at it (the FK is PROTECT).
    """
    category.refresh_from_db(fields=['article_count'])
    if category.article_count > 0:
        raise CategoryInUseError(
            "Cannot delete category with articles. Please reassign or delete articles first.",
            details={'article_count': category.article_count},
        )

    try:
        with transaction.atomic():
            category.delete()
    except ProtectedError as e:
        raise CategoryInUseError(
            "Cannot delete category while articles still reference it.",
            details={'referencing_articles': len(e.protected_objects)},
        )

    logger.info("Deleted category %s", category.slug)
