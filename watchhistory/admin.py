from django.contrib import admin
from .models import WatchHistory

@admin.register(WatchHistory)
class WatchHistoryAdmin(admin.ModelAdmin):
    list_display = ['user', 'movie', 'status', 'user_rating', 'is_favorite', 'watched_at']
    list_filter = ['status', 'is_favorite']
    search_fields = ['user__username', 'movie__title']
    raw_id_fields = ['movie']
