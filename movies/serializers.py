from rest_framework import serializers
from .models import Movie
from .tmdb import poster_url, backdrop_url


class MovieSerializer(serializers.ModelSerializer):
    poster_url = serializers.ReadOnlyField()
    backdrop_url = serializers.ReadOnlyField()

    class Meta:
        model = Movie
        fields = [
            'id', 'tmdb_id', 'title', 'overview', 'release_date', 'genres',
            'poster_path', 'poster_url', 'backdrop_path', 'backdrop_url',
            'trailer_key', 'runtime', 'original_language', 'popularity',
            'vote_average', 'vote_count', 'adult', 'streaming_platforms',
            'created_at'
        ]


class CandidateSerializer(serializers.Serializer):
    """Catalog list entry; not backed by the cache."""
    tmdb_id = serializers.IntegerField()
    title = serializers.CharField()
    overview = serializers.CharField()
    release_date = serializers.CharField(allow_null=True)
    genre_ids = serializers.ListField(child=serializers.IntegerField())
    poster_path = serializers.CharField(allow_null=True)
    poster_url = serializers.SerializerMethodField()
    backdrop_path = serializers.CharField(allow_null=True)
    backdrop_url = serializers.SerializerMethodField()
    vote_average = serializers.FloatField()
    vote_count = serializers.IntegerField()
    original_language = serializers.CharField()
    adult = serializers.BooleanField()
    popularity = serializers.FloatField()

    def get_poster_url(self, obj):
        return poster_url(obj.poster_path)

    def get_backdrop_url(self, obj):
        return backdrop_url(obj.backdrop_path)


class CatalogPageSerializer(serializers.Serializer):
    page = serializers.IntegerField()
    total_pages = serializers.IntegerField()
    total_results = serializers.IntegerField()
    movies = CandidateSerializer(source='results', many=True)


class GenreSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
