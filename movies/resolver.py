import logging
from concurrent.futures import ThreadPoolExecutor

from django.conf import settings
from django.utils.dateparse import parse_date

from moodreel.exceptions import NotFound, UpstreamFailure
from .models import Movie
from .tmdb import TMDBClient

logger = logging.getLogger(__name__)


def _date_or_none(value):
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError:
        return None


def candidate_fields(candidate):
    # Search payloads only carry genre ids; they are stored as opaque labels.
    return {
        'title': candidate.title,
        'overview': candidate.overview or 'No overview available',
        'release_date': _date_or_none(candidate.release_date),
        'genres': [str(g) for g in candidate.genre_ids],
        'poster_path': candidate.poster_path,
        'backdrop_path': candidate.backdrop_path,
        'vote_average': candidate.vote_average,
        'vote_count': candidate.vote_count,
        'original_language': candidate.original_language,
        'adult': candidate.adult,
        'popularity': candidate.popularity,
    }


def details_fields(details):
    return {
        'title': details.title,
        'overview': details.overview or 'No overview available',
        'release_date': _date_or_none(details.release_date),
        'genres': list(details.genres),
        'poster_path': details.poster_path,
        'backdrop_path': details.backdrop_path,
        'runtime': details.runtime,
        'original_language': details.original_language,
        'vote_average': details.vote_average,
        'vote_count': details.vote_count,
        'adult': details.adult,
        'popularity': details.popularity,
        'trailer_key': details.trailer_key,
        'streaming_platforms': details.streaming_platforms,
    }


class MovieResolver:
    """
    Read-through cache in front of the movie catalog.

    Titles resolve to the catalog's top search hit; ids resolve through the
    detail endpoint. Existing rows are returned as-is and never refreshed.
    """

    def __init__(self, catalog=None, max_workers=None):
        self.catalog = catalog or TMDBClient()
        self.max_workers = max_workers or settings.RESOLVER_MAX_WORKERS

    def lookup(self, title):
        page = self.catalog.search(title, page=1)
        if not page.results:
            return None
        return page.results[0]

    def cache_candidate(self, candidate):
        movie, created = Movie.objects.get_or_create(
            tmdb_id=candidate.tmdb_id,
            defaults=candidate_fields(candidate)
        )
        if created:
            logger.info(f"Cached movie {movie.tmdb_id} '{movie.title}' from search result")
        return movie

    def resolve_title(self, title):
        """
        Returns the cached Movie for title, or None when the catalog has no match.
        Transport/service errors raise UpstreamFailure.
        """
        candidate = self.lookup(title)
        if candidate is None:
            return None
        return self.cache_candidate(candidate)

    def resolve_tmdb_id(self, tmdb_id):
        movie = Movie.objects.filter(tmdb_id=tmdb_id).first()
        if movie:
            return movie

        details = self.catalog.get_details(tmdb_id)
        movie, created = Movie.objects.get_or_create(
            tmdb_id=details.tmdb_id,
            defaults=details_fields(details)
        )
        if created:
            logger.info(f"Cached movie {movie.tmdb_id} '{movie.title}' from details")
        return movie

    def _safe_lookup(self, title):
        try:
            candidate = self.lookup(title)
        except (UpstreamFailure, NotFound) as e:
            logger.warning(f"Dropping title '{title}': {e.detail}")
            return None
        if candidate is None:
            logger.info(f"No catalog match for '{title}'")
        return candidate

    def resolve_titles(self, titles):
        """
        Resolves every title, returning a list aligned with ``titles`` where
        unmatched or failed titles are None.

        Catalog searches run concurrently; cache writes happen afterwards on the
        calling thread in the original title order.
        """
        titles = list(titles)
        if not titles:
            return []

        workers = max(1, min(self.max_workers, len(titles)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            candidates = list(executor.map(self._safe_lookup, titles))

        resolved = []
        for candidate in candidates:
            resolved.append(self.cache_candidate(candidate) if candidate else None)
        return resolved
