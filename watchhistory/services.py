from collections import Counter

from django.db import transaction
from django.utils import timezone

from moodreel.exceptions import NotFound, Forbidden
from movies.resolver import MovieResolver
from .models import WatchHistory


class WatchHistoryService:
    def __init__(self, resolver=None):
        self.resolver = resolver or MovieResolver()

    @staticmethod
    def _set_status(entry, status):
        entry.status = status
        if status == WatchHistory.Status.WATCHED and not entry.watched_at:
            entry.watched_at = timezone.now()

    @classmethod
    def _apply(cls, entry, status=None, user_rating=None, review=None):
        if status:
            cls._set_status(entry, status)
        if user_rating:
            entry.user_rating = user_rating
        if review:
            entry.review = review

    def add(self, user, tmdb_id, status=WatchHistory.Status.WATCHLIST, user_rating=None, review=None):
        """
        Adds a movie (cached through the detail path) to the user's history,
        or updates the existing entry. Returns (entry, created).
        """
        movie = self.resolver.resolve_tmdb_id(tmdb_id)

        with transaction.atomic():
            entry, created = WatchHistory.objects.select_for_update().get_or_create(user=user, movie=movie)
            self._apply(entry, status=status, user_rating=user_rating, review=review)
            entry.save()
        return entry, created

    @staticmethod
    def get_owned(entry_id, user):
        entry = WatchHistory.objects.select_related('movie').filter(pk=entry_id).first()
        if entry is None:
            raise NotFound('Watch history item not found.')
        if entry.user_id != user.pk:
            raise Forbidden('Not authorized to access this record.')
        return entry

    @classmethod
    def update(cls, entry, **changes):
        if changes.get('status'):
            cls._set_status(entry, changes['status'])
        for field in ('user_rating', 'review', 'is_favorite', 'rewatch_count'):
            if field in changes:
                setattr(entry, field, changes[field])
        entry.save()
        return entry

    @staticmethod
    def toggle_favorite(entry):
        entry.is_favorite = not entry.is_favorite
        entry.save(update_fields=['is_favorite', 'updated_at'])
        return entry

    @staticmethod
    def stats(user):
        entries = WatchHistory.objects.filter(user=user)
        counts = Counter(entries.values_list('status', flat=True))
        watched = list(entries.filter(status=WatchHistory.Status.WATCHED).select_related('movie'))

        total_runtime = 0
        genre_count = Counter()
        for entry in watched:
            total_runtime += entry.movie.runtime or 0
            genre_count.update(entry.movie.genres or [])

        # First genre to reach the highest count wins
        favorite_genre = None
        max_count = 0
        for genre, count in genre_count.items():
            if count > max_count:
                favorite_genre, max_count = genre, count

        ratings = [e.user_rating for e in watched if e.user_rating]
        average_rating = round(sum(ratings) / len(ratings), 1) if ratings else 0

        return {
            'counts': {
                'watchlist': counts.get(WatchHistory.Status.WATCHLIST, 0),
                'watching': counts.get(WatchHistory.Status.WATCHING, 0),
                'watched': counts.get(WatchHistory.Status.WATCHED, 0),
                'favorites': entries.filter(is_favorite=True).count(),
                'total': sum(counts.values()),
            },
            'watched_stats': {
                'total_movies': len(watched),
                'total_hours': round(total_runtime / 60),
                'total_minutes': total_runtime,
                'average_rating': average_rating,
                'favorite_genre': favorite_genre,
                'genre_breakdown': dict(genre_count),
            },
        }
