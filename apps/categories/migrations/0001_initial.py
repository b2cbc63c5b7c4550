# Initial categories schema

import apps.categories.models
from django.db import migrations, models
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
                ('name', models.CharField(help_text='Display name', max_length=100)),
                ('slug', models.CharField(help_text='URL-safe identifier', max_length=100, unique=True, validators=[apps.categories.models.slug_validator])),
                ('description', models.CharField(blank=True, default='', max_length=500)),
                ('color', models.CharField(help_text='Hex color, #RGB or #RRGGBB', max_length=7, validators=[apps.categories.models.color_validator])),
                ('article_count', models.PositiveIntegerField(default=0, editable=False, help_text='Number of PUBLISHED articles in this category')),
            ],
            options={
                'verbose_name': 'Category',
                'verbose_name_plural': 'Categories',
                'db_table': 'categories',
                'ordering': ['name'],
            },
        ),
    ]
