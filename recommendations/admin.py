from django.contrib import admin
from .models import Recommendation, RecommendedMovie

class RecommendedMovieInline(admin.TabularInline):
    model = RecommendedMovie
    extra = 0
    raw_id_fields = ['movie']

@admin.register(Recommendation)
class RecommendationAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'prompt', 'ai_model', 'feedback_rating', 'created_at']
    list_filter = ['ai_model', 'feedback_rating', 'created_at']
    search_fields = ['prompt', 'user__username']
    inlines = [RecommendedMovieInline]
