"""
Scheduled maintenance for category counters.
"""

import logging

from celery import shared_task
from django.db import DatabaseError

from .counters import recount_all

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=2)
def reconcile_category_counts(self, slugs=None):
    """Recount every category's article_count; report the ones that drifted."""
    try:
        drifted = recount_all(slugs)
    except DatabaseError as exc:
        logger.error("Category reconciliation failed: %s", exc)
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))

    if drifted:
        logger.warning("Reconciled %d drifted category counter(s)", len(drifted))
    else:
        logger.info("Category counters consistent")

    return {
        "drifted": {category.slug: drift for category, drift in drifted},
    }
