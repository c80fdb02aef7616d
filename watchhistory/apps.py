from django.apps import AppConfig


class WatchHistoryConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'watchhistory'
