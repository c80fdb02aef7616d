import time
from django.core.management.base import BaseCommand

from moodreel.exceptions import NotFound, UpstreamFailure
from movies.models import Movie
from movies.resolver import MovieResolver
from movies.tmdb import TMDBClient


class Command(BaseCommand):
    help = 'Cache full TMDB records for the current trending and popular movies'

    def add_arguments(self, parser):
        parser.add_argument('--pages', type=int, default=1, help='Popular list pages to walk')
        parser.add_argument('--delay', type=float, default=0.1, help='Seconds between detail fetches')

    def handle(self, *args, **options):
        catalog = TMDBClient()
        if not catalog.api_key:
            self.stdout.write(self.style.WARNING("TMDB_API_KEY not set. Nothing to do."))
            return

        resolver = MovieResolver(catalog=catalog)

        # 1. Collect ids from the list endpoints
        try:
            tmdb_ids = [c.tmdb_id for c in catalog.get_trending('week').results]
            for page in range(1, options['pages'] + 1):
                tmdb_ids += [c.tmdb_id for c in catalog.get_popular(page).results]
        except UpstreamFailure as e:
            self.stdout.write(self.style.ERROR(f"Could not fetch movie lists: {e.detail}"))
            return

        # 2. Cache anything we don't have yet
        created = 0
        for tmdb_id in dict.fromkeys(tmdb_ids):
            if Movie.objects.filter(tmdb_id=tmdb_id).exists():
                continue
            try:
                movie = resolver.resolve_tmdb_id(tmdb_id)
            except (UpstreamFailure, NotFound) as e:
                self.stdout.write(self.style.ERROR(f"Error caching {tmdb_id}: {e.detail}"))
                continue

            self.stdout.write(f"Cached Movie: {movie.title}")
            created += 1
            time.sleep(options['delay'])  # Respect API rate limits

        self.stdout.write(self.style.SUCCESS(f"Cache warm-up complete. {created} new movies."))
