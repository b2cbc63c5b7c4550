from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'

    def ready(self):
        """Wire signal receivers and health checks."""
        from . import models  # noqa: F401 - registers StaffProfile receivers
        from .observability import register_default_checks
        register_default_checks()
