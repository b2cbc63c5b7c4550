"""
Project configuration package.

Loads the Celery app so @shared_task registers against it.
"""

from .celery import app as celery_app

__all__ = ('celery_app',)
