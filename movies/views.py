from rest_framework import viewsets, permissions
from rest_framework.decorators import action
from rest_framework.response import Response

from moodreel.exceptions import ValidationFailure
from .resolver import MovieResolver
from .serializers import MovieSerializer, CatalogPageSerializer, GenreSerializer
from .tmdb import TMDBClient, TRENDING_WINDOWS


def page_param(request):
    raw = request.query_params.get('page', 1)
    try:
        page = int(raw)
    except (TypeError, ValueError):
        raise ValidationFailure('Page must be a positive integer.')
    if page < 1:
        raise ValidationFailure('Page must be a positive integer.')
    return page


class MovieViewSet(viewsets.ViewSet):
    """
    Public catalog browsing. List endpoints proxy TMDB; the detail endpoint
    returns the locally cached record, caching it on first request.
    """
    permission_classes = [permissions.AllowAny]
    lookup_field = 'tmdb_id'
    lookup_value_regex = r'\d+'

    def get_catalog(self):
        return TMDBClient()

    def paged(self, catalog_page, **extra):
        data = CatalogPageSerializer(catalog_page).data
        data.update(extra)
        return Response(data)

    def retrieve(self, request, tmdb_id=None):
        movie = MovieResolver(catalog=self.get_catalog()).resolve_tmdb_id(int(tmdb_id))
        return Response(MovieSerializer(movie).data)

    @action(detail=False)
    def search(self, request):
        query = (request.query_params.get('query') or '').strip()
        if not query:
            raise ValidationFailure('Please provide a search query.')
        return self.paged(self.get_catalog().search(query, page_param(request)), query=query)

    @action(detail=False)
    def trending(self, request):
        time_window = request.query_params.get('time_window', 'week')
        if time_window not in TRENDING_WINDOWS:
            raise ValidationFailure("time_window must be 'day' or 'week'.")
        return self.paged(self.get_catalog().get_trending(time_window), time_window=time_window)

    @action(detail=False)
    def popular(self, request):
        return self.paged(self.get_catalog().get_popular(page_param(request)))

    @action(detail=False, url_path='top-rated')
    def top_rated(self, request):
        return self.paged(self.get_catalog().get_top_rated(page_param(request)))

    @action(detail=False)
    def genres(self, request):
        return Response(GenreSerializer(self.get_catalog().get_genres(), many=True).data)

    @action(detail=False, url_path=r'genre/(?P<genre_id>\d+)')
    def by_genre(self, request, genre_id=None):
        page = self.get_catalog().get_by_genre(int(genre_id), page_param(request))
        return self.paged(page, genre_id=int(genre_id))

    @action(detail=True)
    def similar(self, request, tmdb_id=None):
        return self.paged(self.get_catalog().get_similar(int(tmdb_id), page_param(request)))

    @action(detail=True)
    def recommendations(self, request, tmdb_id=None):
        return self.paged(self.get_catalog().get_recommended(int(tmdb_id), page_param(request)))
