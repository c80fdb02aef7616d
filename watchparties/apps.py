from django.apps import AppConfig


class WatchPartiesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'watchparties'
