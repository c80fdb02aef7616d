from unittest import mock

import pytest

from moodreel.exceptions import Forbidden, NotFound
from movies.models import Movie
from movies.resolver import MovieResolver
from watchhistory.models import WatchHistory
from watchhistory.services import WatchHistoryService
from watchhistory.views import WatchHistoryViewSet
from .conftest import FakeCatalog, details

pytestmark = pytest.mark.django_db


@pytest.fixture
def service():
    catalog = FakeCatalog(details={1124: details(1124, 'The Prestige'), 949: details(949, 'Heat', runtime=170)})
    return WatchHistoryService(resolver=MovieResolver(catalog=catalog))


def movie(tmdb_id, title, genres, runtime):
    return Movie.objects.create(tmdb_id=tmdb_id, title=title, genres=genres, runtime=runtime)


def test_add_caches_movie_and_entry(service, user):
    entry, created = service.add(user, 1124)
    assert created
    assert entry.status == WatchHistory.Status.WATCHLIST
    assert entry.watched_at is None
    assert entry.movie.title == 'The Prestige'


def test_add_again_updates_existing(service, user):
    service.add(user, 1124)
    entry, created = service.add(user, 1124, status='watched', user_rating=5)
    assert not created
    assert entry.watched_at is not None
    assert entry.user_rating == 5
    assert WatchHistory.objects.count() == 1


def test_unknown_movie(service, user):
    with pytest.raises(NotFound):
        service.add(user, 555)


def test_watched_at_set_once(service, user):
    entry, _ = service.add(user, 1124, status='watched')
    first = entry.watched_at
    WatchHistoryService.update(entry, status='watching')
    WatchHistoryService.update(entry, status='watched', rewatch_count=1)
    entry.refresh_from_db()
    assert entry.watched_at == first
    assert entry.rewatch_count == 1


def test_ownership(service, user, other_user):
    entry, _ = service.add(user, 1124)
    with pytest.raises(Forbidden):
        WatchHistoryService.get_owned(entry.pk, other_user)
    with pytest.raises(NotFound):
        WatchHistoryService.get_owned(entry.pk + 100, user)


def test_toggle_favorite(service, user):
    entry, _ = service.add(user, 1124)
    assert WatchHistoryService.toggle_favorite(entry).is_favorite
    assert not WatchHistoryService.toggle_favorite(entry).is_favorite


def test_stats(user, other_user):
    WatchHistory.objects.create(user=user, movie=movie(1, 'A', ['Drama', 'Crime'], 120), status='watched', user_rating=4)
    WatchHistory.objects.create(user=user, movie=movie(2, 'B', ['Crime'], 100), status='watched', user_rating=5)
    WatchHistory.objects.create(user=user, movie=movie(3, 'C', ['Comedy'], 90), status='watched')
    WatchHistory.objects.create(user=user, movie=movie(4, 'D', ['Drama'], 95), status='watchlist', is_favorite=True)
    WatchHistory.objects.create(user=other_user, movie=movie(5, 'E', ['Horror'], 80), status='watched')

    stats = WatchHistoryService.stats(user)

    assert stats['counts'] == {'watchlist': 1, 'watching': 0, 'watched': 3, 'favorites': 1, 'total': 4}
    watched = stats['watched_stats']
    assert watched['total_movies'] == 3
    assert watched['total_minutes'] == 310
    assert watched['total_hours'] == 5
    assert watched['average_rating'] == 4.5
    assert watched['favorite_genre'] == 'Crime'
    assert watched['genre_breakdown'] == {'Drama': 1, 'Crime': 2, 'Comedy': 1}


def test_stats_empty(user):
    stats = WatchHistoryService.stats(user)
    assert stats['counts']['total'] == 0
    assert stats['watched_stats']['favorite_genre'] is None
    assert stats['watched_stats']['average_rating'] == 0


class TestWatchHistoryAPI:
    def test_add_then_update(self, api_client, service):
        with mock.patch.object(WatchHistoryViewSet, 'get_service', return_value=service):
            resp = api_client.post('/api/watchhistory/', {'tmdb_id': 949}, format='json')
            assert resp.status_code == 201
            resp = api_client.post('/api/watchhistory/', {'tmdb_id': 949, 'status': 'watched'}, format='json')
            assert resp.status_code == 200
        assert resp.data['movie']['runtime'] == 170
        assert resp.data['watched_at'] is not None

    def test_invalid_status(self, api_client):
        resp = api_client.post('/api/watchhistory/', {'tmdb_id': 949, 'status': 'abandoned'}, format='json')
        assert resp.status_code == 400
        assert resp.data['error'] == 'validation'

    def test_filter_and_favorite(self, api_client, user):
        seen = WatchHistory.objects.create(user=user, movie=movie(1, 'A', [], 90), status='watched')
        WatchHistory.objects.create(user=user, movie=movie(2, 'B', [], 90), status='watchlist')

        resp = api_client.get('/api/watchhistory/?status=watched')
        assert [e['id'] for e in resp.data['results']] == [seen.pk]

        resp = api_client.patch(f'/api/watchhistory/{seen.pk}/favorite/')
        assert resp.data['is_favorite'] is True

        resp = api_client.patch(f'/api/watchhistory/{seen.pk}/', {'user_rating': 3}, format='json')
        assert resp.data['user_rating'] == 3

        resp = api_client.get('/api/watchhistory/stats/')
        assert resp.data['counts']['favorites'] == 1

        assert api_client.delete(f'/api/watchhistory/{seen.pk}/').status_code == 204
