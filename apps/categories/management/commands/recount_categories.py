"""
Management command for recomputing category article counts.

Usage:
    python manage.py recount_categories
    python manage.py recount_categories --slug rajya --slug khel
    python manage.py recount_categories --dry-run
"""

from django.core.management.base import BaseCommand

from apps.categories.counters import published_count, recount_all
from apps.categories.models import Category


class Command(BaseCommand):
    help = 'Recompute each category article_count from its PUBLISHED articles'

    def add_arguments(self, parser):
        parser.add_argument(
            '--slug',
            action='append',
            dest='slugs',
            default=[],
            help='Only recount this category (repeatable)'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report drift without writing'
        )

    def handle(self, *args, **options):
        slugs = options['slugs']

        if options['dry_run']:
            queryset = Category.objects.all()
            if slugs:
                queryset = queryset.filter(slug__in=slugs)
            drifted = 0
            for category in queryset:
                actual = published_count(category)
                if actual != category.article_count:
                    drifted += 1
                    self.stdout.write(
                        f"{category.slug}: stored {category.article_count}, actual {actual}"
                    )
            self.stdout.write(self.style.SUCCESS(f"{drifted} category counter(s) would change"))
            return

        drifted = recount_all(slugs)
        for category, drift in drifted:
            self.stdout.write(f"{category.slug}: corrected by {drift:+d}")
        self.stdout.write(self.style.SUCCESS(f"Recounted; {len(drifted)} counter(s) corrected"))
