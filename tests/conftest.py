import threading

import pytest
from rest_framework.test import APIClient

from moodreel.exceptions import UpstreamFailure, NotFound
from movies.tmdb import CatalogPage, Genre, MovieDetails


def candidate(tmdb_id, title, **extra):
    data = {
        'id': tmdb_id,
        'title': title,
        'overview': f"{title} overview",
        'release_date': '2010-07-16',
        'genre_ids': [28, 878],
        'poster_path': f"/{tmdb_id}.jpg",
        'backdrop_path': None,
        'vote_average': 8.1,
        'vote_count': 1000,
        'original_language': 'en',
        'adult': False,
        'popularity': 50.0,
    }
    data.update(extra)
    return data


def details(tmdb_id, title, **extra):
    data = {
        'id': tmdb_id,
        'title': title,
        'overview': f"{title} overview",
        'release_date': '2006-10-20',
        'genres': [{'id': 18, 'name': 'Drama'}, {'id': 9648, 'name': 'Mystery'}],
        'poster_path': f"/{tmdb_id}.jpg",
        'backdrop_path': f"/{tmdb_id}-bg.jpg",
        'runtime': 130,
        'original_language': 'en',
        'vote_average': 8.2,
        'vote_count': 15000,
        'adult': False,
        'popularity': 40.0,
        'videos': {'results': [
            {'type': 'Teaser', 'site': 'YouTube', 'key': 'teaser-key'},
            {'type': 'Trailer', 'site': 'Vimeo', 'key': 'vimeo-key'},
            {'type': 'Trailer', 'site': 'YouTube', 'key': 'trailer-key'},
        ]},
    }
    data.update(extra)
    return data


class FakeCatalog:
    """In-memory stand-in for TMDBClient."""

    def __init__(self, results=None, failures=(), details=None):
        self.results = results or {}
        self.failures = set(failures)
        self.details = details or {}
        self.search_calls = []
        self.detail_calls = []
        self._lock = threading.Lock()

    def search(self, query, page=1):
        with self._lock:
            self.search_calls.append(query)
        if query in self.failures:
            raise UpstreamFailure('catalog unavailable')
        return CatalogPage.from_payload({'page': page, 'total_pages': 1, 'results': self.results.get(query, [])})

    def get_details(self, tmdb_id):
        self.detail_calls.append(tmdb_id)
        if tmdb_id not in self.details:
            raise NotFound('Movie not found in the catalog.')
        return MovieDetails.from_payload(self.details[tmdb_id])

    def _listing(self, *args, **kwargs):
        results = [r[0] for r in self.results.values() if r]
        return CatalogPage.from_payload({'page': 1, 'total_pages': 1, 'results': results})

    get_trending = get_popular = get_top_rated = get_by_genre = get_similar = get_recommended = _listing

    def get_genres(self):
        return [Genre(id=28, name='Action'), Genre(id=35, name='Comedy')]


class FakeLLM:
    def __init__(self, text='', error=None, model='test-model'):
        self.text = text
        self.error = error
        self.model = model
        self.calls = []

    def complete(self, system_prompt, user_prompt, model=None, temperature=0.8, max_tokens=1000):
        self.calls.append({
            'system': system_prompt,
            'user': user_prompt,
            'model': model,
            'temperature': temperature,
            'max_tokens': max_tokens,
        })
        if self.error:
            raise self.error
        return self.text


@pytest.fixture
def make_user(django_user_model):
    def make(username, **extra):
        extra.setdefault('email', f"{username}@example.com")
        return django_user_model.objects.create_user(username=username, password='secret123', **extra)
    return make


@pytest.fixture
def user(make_user):
    return make_user('alice', preferred_genres=['Thriller'], preferred_languages=['English'])


@pytest.fixture
def other_user(make_user):
    return make_user('bob')


@pytest.fixture
def api_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client
