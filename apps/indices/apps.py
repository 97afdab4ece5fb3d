from django.apps import AppConfig


class IndicesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.indices'
    verbose_name = 'Survey Indices'
