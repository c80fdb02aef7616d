from django.db import models

from .tmdb import poster_url, backdrop_url


class Movie(models.Model):
    """
    Local cache of a catalog movie, keyed by its TMDB id.
    Rows are inserted on first sight and never refreshed afterwards.
    """
    tmdb_id = models.IntegerField(unique=True)
    title = models.CharField(max_length=255)
    overview = models.TextField(default='No overview available', blank=True)
    release_date = models.DateField(null=True, blank=True)
    # Genre names from the detail endpoint, or raw genre ids (as strings) from search results
    genres = models.JSONField(default=list, blank=True)
    poster_path = models.CharField(max_length=255, null=True, blank=True)
    backdrop_path = models.CharField(max_length=255, null=True, blank=True)
    trailer_key = models.CharField(max_length=64, null=True, blank=True)
    runtime = models.PositiveIntegerField(default=0)
    original_language = models.CharField(max_length=10, default='en')
    popularity = models.FloatField(default=0.0)
    vote_average = models.FloatField(default=0.0)
    vote_count = models.PositiveIntegerField(default=0)
    adult = models.BooleanField(default=False)
    streaming_platforms = models.JSONField(default=list, blank=True)  # [{name, link, logo}]

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def poster_url(self):
        return poster_url(self.poster_path)

    @property
    def backdrop_url(self):
        return backdrop_url(self.backdrop_path)

    def __str__(self):
        return self.title
