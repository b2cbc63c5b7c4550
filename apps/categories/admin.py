"""
Admin interface for categories.
"""

from django.contrib import admin
from .models import Category


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'color', 'article_count', 'updated_at']
    search_fields = ['name', 'slug']
    readonly_fields = ['id', 'article_count', 'created_at', 'updated_at']
    prepopulated_fields = {'slug': ('name',)}
