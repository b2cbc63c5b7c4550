"""
Admin interface for articles.

Status, slug, version and published_at are read-only here; status changes
go through the API so that counters and history stay consistent.
"""

from django.contrib import admin
from .models import Article, ArticleStatusChange


class ArticleStatusChangeInline(admin.TabularInline):
    model = ArticleStatusChange
    extra = 0
    can_delete = False
    fields = ['from_status', 'to_status', 'changed_by', 'note', 'created_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    list_display = [
        'title_short',
        'status',
        'category',
        'author',
        'view_count',
        'published_at',
    ]

    list_filter = [
        'status',
        'category',
        ('published_at', admin.DateFieldListFilter),
    ]

    search_fields = ['title', 'slug', 'content']

    readonly_fields = [
        'id',
        'slug',
        'status',
        'published_at',
        'version',
        'view_count',
        'created_at',
        'updated_at',
    ]

    raw_id_fields = ['author']
    inlines = [ArticleStatusChangeInline]
    date_hierarchy = 'created_at'

    @admin.display(description='Title', ordering='title')
    def title_short(self, obj):
        return obj.title[:60] + '...' if len(obj.title) > 60 else obj.title
