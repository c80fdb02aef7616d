from django.db import models
from django.conf import settings
from movies.models import Movie


class WatchHistory(models.Model):
    class Status(models.TextChoices):
        WATCHLIST = 'watchlist', 'Watchlist'
        WATCHING = 'watching', 'Watching'
        WATCHED = 'watched', 'Watched'

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='watch_history')
    movie = models.ForeignKey(Movie, on_delete=models.CASCADE, related_name='watch_history')
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.WATCHLIST)
    user_rating = models.PositiveSmallIntegerField(choices=[(i, i) for i in range(1, 6)], null=True, blank=True)
    review = models.CharField(max_length=500, null=True, blank=True)
    watched_at = models.DateTimeField(null=True, blank=True)
    is_favorite = models.BooleanField(default=False)
    rewatch_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "Watch history"
        ordering = ['-created_at']
        unique_together = ('user', 'movie')
        indexes = [models.Index(fields=['user', 'status', '-created_at'], name='history_user_status_idx')]

    def __str__(self):
        return f"{self.user} - {self.movie} ({self.status})"
