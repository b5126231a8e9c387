from django.apps import AppConfig


class BuzzwordAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'buzzword_app'
    verbose_name = 'Buzzword Bingo'
