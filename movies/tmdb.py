"""
Thin client over the TMDB v3 REST API.

Search/list endpoints and the detail endpoint return different payload
shapes (genre ids vs. genre names, no runtime or videos in lists), so each
gets its own data-transfer class instead of passing raw dicts around.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests
from django.conf import settings

from moodreel.exceptions import NotFound, UpstreamFailure

logger = logging.getLogger(__name__)

TRENDING_WINDOWS = ('day', 'week')
TRAILER_TYPE = 'Trailer'
TRAILER_SITE = 'YouTube'


def image_url(path, size):
    if not path:
        return None
    return f"{settings.TMDB_IMAGE_BASE_URL}/{size}{path}"


def poster_url(path, size='w500'):
    return image_url(path, size)


def backdrop_url(path, size='w1280'):
    return image_url(path, size)


@dataclass
class SearchCandidate:
    """One entry of a search/list result page."""
    tmdb_id: int
    title: str
    overview: str = ''
    release_date: Optional[str] = None
    genre_ids: List[int] = field(default_factory=list)
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    vote_average: float = 0.0
    vote_count: int = 0
    original_language: str = 'en'
    adult: bool = False
    popularity: float = 0.0

    @classmethod
    def from_payload(cls, data):
        return cls(
            tmdb_id=int(data['id']),
            title=data.get('title') or data.get('original_title') or '',
            overview=data.get('overview') or '',
            release_date=data.get('release_date') or None,
            genre_ids=list(data.get('genre_ids') or []),
            poster_path=data.get('poster_path'),
            backdrop_path=data.get('backdrop_path'),
            vote_average=data.get('vote_average') or 0.0,
            vote_count=data.get('vote_count') or 0,
            original_language=data.get('original_language') or 'en',
            adult=bool(data.get('adult', False)),
            popularity=data.get('popularity') or 0.0,
        )


@dataclass
class MovieDetails:
    """Payload of /movie/{id} with videos and watch providers appended."""
    tmdb_id: int
    title: str
    overview: str = ''
    release_date: Optional[str] = None
    genres: List[str] = field(default_factory=list)
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    runtime: int = 0
    original_language: str = 'en'
    vote_average: float = 0.0
    vote_count: int = 0
    adult: bool = False
    popularity: float = 0.0
    trailer_key: Optional[str] = None
    streaming_platforms: List[dict] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data, region='US'):
        return cls(
            tmdb_id=int(data['id']),
            title=data.get('title') or data.get('original_title') or '',
            overview=data.get('overview') or '',
            release_date=data.get('release_date') or None,
            genres=[g['name'] for g in data.get('genres') or [] if g.get('name')],
            poster_path=data.get('poster_path'),
            backdrop_path=data.get('backdrop_path'),
            runtime=data.get('runtime') or 0,
            original_language=data.get('original_language') or 'en',
            vote_average=data.get('vote_average') or 0.0,
            vote_count=data.get('vote_count') or 0,
            adult=bool(data.get('adult', False)),
            popularity=data.get('popularity') or 0.0,
            trailer_key=extract_trailer_key(data.get('videos')),
            streaming_platforms=extract_streaming_platforms(data.get('watch/providers'), region),
        )


@dataclass
class Genre:
    id: int
    name: str


@dataclass
class CatalogPage:
    page: int
    total_pages: int
    total_results: int
    results: List[SearchCandidate]

    @classmethod
    def from_payload(cls, data):
        results = [SearchCandidate.from_payload(item) for item in data.get('results') or []]
        return cls(
            page=data.get('page') or 1,
            total_pages=data.get('total_pages') or 1,
            total_results=data.get('total_results') or len(results),
            results=results,
        )


def extract_trailer_key(videos):
    """First YouTube trailer key in an appended videos block, if any."""
    for video in (videos or {}).get('results') or []:
        if video.get('type') == TRAILER_TYPE and video.get('site') == TRAILER_SITE:
            return video.get('key')
    return None


def extract_streaming_platforms(providers, region):
    region_data = ((providers or {}).get('results') or {}).get(region) or {}
    link = region_data.get('link')
    return [
        {
            'name': p.get('provider_name'),
            'link': link,
            'logo': image_url(p.get('logo_path'), 'w92'),
        }
        for p in region_data.get('flatrate') or []
    ]


class TMDBClient:
    def __init__(self, api_key=None, base_url=None, timeout=None):
        self.api_key = api_key if api_key is not None else settings.TMDB_API_KEY
        self.base_url = (base_url or settings.TMDB_BASE_URL).rstrip('/')
        self.timeout = timeout or settings.TMDB_TIMEOUT

    def _get(self, path, **params):
        params['api_key'] = self.api_key
        try:
            resp = requests.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        except requests.Timeout:
            logger.error(f"TMDB request timed out: {path}")
            raise UpstreamFailure('Movie catalog request timed out.')
        except requests.RequestException as e:
            logger.error(f"TMDB request failed: {path}: {e}")
            raise UpstreamFailure('Failed to reach the movie catalog.')

        if resp.status_code == 404:
            raise NotFound('Movie not found in the catalog.')
        if resp.status_code != 200:
            logger.error(f"TMDB returned {resp.status_code} for {path}")
            raise UpstreamFailure(f"Movie catalog returned HTTP {resp.status_code}.")

        try:
            data = resp.json()
        except ValueError:
            raise UpstreamFailure('Movie catalog returned an unreadable response.')
        if not isinstance(data, dict):
            raise UpstreamFailure('Movie catalog returned an unexpected payload.')
        return data

    def _page(self, path, **params):
        data = self._get(path, **params)
        try:
            return CatalogPage.from_payload(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UpstreamFailure(f"Unexpected movie catalog payload: {e}")

    def search(self, query, page=1):
        return self._page('/search/movie', query=query, page=page, include_adult='false')

    def get_details(self, tmdb_id):
        data = self._get(f"/movie/{tmdb_id}", append_to_response='videos,watch/providers')
        try:
            return MovieDetails.from_payload(data, region=settings.TMDB_WATCH_REGION)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UpstreamFailure(f"Unexpected movie catalog payload: {e}")

    def get_trending(self, time_window='week'):
        return self._page(f"/trending/movie/{time_window}")

    def get_popular(self, page=1):
        return self._page('/movie/popular', page=page)

    def get_top_rated(self, page=1):
        return self._page('/movie/top_rated', page=page)

    def get_by_genre(self, genre_id, page=1):
        return self._page('/discover/movie', with_genres=genre_id, page=page, sort_by='popularity.desc')

    def get_similar(self, tmdb_id, page=1):
        return self._page(f"/movie/{tmdb_id}/similar", page=page)

    def get_recommended(self, tmdb_id, page=1):
        return self._page(f"/movie/{tmdb_id}/recommendations", page=page)

    def get_genres(self):
        data = self._get('/genre/movie/list')
        try:
            return [Genre(id=g['id'], name=g['name']) for g in data.get('genres') or []]
        except (AttributeError, KeyError, TypeError) as e:
            raise UpstreamFailure(f"Unexpected movie catalog payload: {e}")
