from django.db import models
from django.conf import settings
from movies.models import Movie


class Recommendation(models.Model):
    PROMPT_MAX_LENGTH = 500

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='recommendations')
    prompt = models.CharField(max_length=PROMPT_MAX_LENGTH)
    ai_response = models.TextField()
    ai_model = models.CharField(max_length=100)
    movies = models.ManyToManyField(Movie, through='RecommendedMovie', related_name='recommendations')

    feedback_rating = models.PositiveSmallIntegerField(choices=[(i, i) for i in range(1, 6)], null=True, blank=True)
    feedback_comment = models.CharField(max_length=200, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [models.Index(fields=['user', '-created_at'], name='rec_user_created_idx')]

    @property
    def recommended_movies(self):
        return [item.movie for item in self.items.all()]

    def __str__(self):
        return f"Recommendation #{self.id} for {self.user}"


class RecommendedMovie(models.Model):
    recommendation = models.ForeignKey(Recommendation, on_delete=models.CASCADE, related_name='items')
    movie = models.ForeignKey(Movie, on_delete=models.CASCADE)
    position = models.PositiveIntegerField()

    class Meta:
        ordering = ['position']
        unique_together = ('recommendation', 'movie')
