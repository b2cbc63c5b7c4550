"""
Category model.

article_count is a denormalized count of PUBLISHED articles. It is written
only by apps.categories.counters; the API and admin treat it as read-only.
"""

from django.core.validators import RegexValidator
from django.db import models

from apps.core.models import BaseModel


slug_validator = RegexValidator(
    regex=r'^[a-z0-9-]+$',
    message='Slug can only contain lowercase letters, numbers, and hyphens',
)

color_validator = RegexValidator(
    regex=r'^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$',
    message='Please enter a valid hex color',
)


class Category(BaseModel):
    """
    A newsroom section (e.g. "rajya", "khel").
    """

    name = models.CharField(
        max_length=100,
        help_text='Display name'
    )

    slug = models.CharField(
        max_length=100,
        unique=True,
        validators=[slug_validator],
        help_text='URL-safe identifier'
    )

    description = models.CharField(
        max_length=500,
        blank=True,
        default='',
    )

    color = models.CharField(
        max_length=7,
        validators=[color_validator],
        help_text='Hex color, #RGB or #RRGGBB'
    )

    # PositiveIntegerField adds a >= 0 CHECK constraint on every backend
    article_count = models.PositiveIntegerField(
        default=0,
        editable=False,
        help_text='Number of PUBLISHED articles in this category'
    )

    class Meta:
        db_table = 'categories'
        ordering = ['name']
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.name
