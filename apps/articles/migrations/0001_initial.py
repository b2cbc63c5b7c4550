# Initial articles schema: articles and their status change log

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import uuid

STATUS_CHOICES = [
    ('DRAFT', 'Draft'),
    ('SUB_EDITOR_REVIEW', 'Sub Editor Review'),
    ('EDITOR_APPROVED', 'Editor Approved'),
    ('PUBLISHED', 'Published'),
    ('ARCHIVED', 'Archived'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('categories', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Article',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
                ('title', models.CharField(help_text='Headline', max_length=200, verbose_name='Title')),
                ('slug', models.CharField(help_text='Derived from the title; regenerated only when the title changes', max_length=120, unique=True, verbose_name='Slug')),
                ('content', models.TextField(verbose_name='Content')),
                ('summary', models.JSONField(blank=True, default=list, help_text='Ordered list of summary bullets')),
                ('tags', models.JSONField(blank=True, default=list, help_text='Normalized tags (lowercase, unique)')),
                ('tag_index', models.TextField(blank=True, default='', editable=False, help_text='Delimited copy of tags for lookups')),
                ('seo', models.JSONField(blank=True, default=dict, help_text='{"title", "meta_description", "keywords"}')),
                ('status', models.CharField(choices=STATUS_CHOICES, db_index=True, default='DRAFT', max_length=20, verbose_name='Status')),
                ('featured_image', models.CharField(help_text='Image URL', max_length=500, verbose_name='Featured Image')),
                ('pdf_url', models.CharField(blank=True, default='', max_length=500, verbose_name='PDF URL')),
                ('published_at', models.DateTimeField(blank=True, db_index=True, help_text='Set the first time the article is published; never cleared', null=True, verbose_name='Published At')),
                ('view_count', models.PositiveIntegerField(default=0, verbose_name='View Count')),
                ('version', models.PositiveIntegerField(default=1, editable=False, help_text='Optimistic-lock revision, bumped on every workflow write')),
                ('author', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='articles', to=settings.AUTH_USER_MODEL, verbose_name='Author')),
                ('category', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='articles', to='categories.category', verbose_name='Category')),
            ],
            options={
                'verbose_name': 'Article',
                'verbose_name_plural': 'Articles',
                'db_table': 'articles',
                'ordering': ['-published_at', '-created_at'],
                'indexes': [
                    models.Index(fields=['status', '-published_at'], name='articles_status_pub_idx'),
                    models.Index(fields=['category', 'status', '-published_at'], name='articles_cat_status_pub_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ArticleStatusChange',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
                ('from_status', models.CharField(blank=True, choices=STATUS_CHOICES, max_length=20, null=True)),
                ('to_status', models.CharField(choices=STATUS_CHOICES, max_length=20)),
                ('note', models.CharField(blank=True, default='', max_length=500)),
                ('article', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='status_changes', to='articles.article')),
                ('changed_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='article_status_changes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Article Status Change',
                'verbose_name_plural': 'Article Status Changes',
                'db_table': 'article_status_changes',
                'ordering': ['created_at'],
            },
        ),
    ]
