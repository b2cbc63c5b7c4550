from django.apps import AppConfig


class AssistantConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.assistant'
    verbose_name = 'AI Assistant'

    def ready(self):
        from .prompts import register_default_prompts
        register_default_prompts()
