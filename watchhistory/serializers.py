from rest_framework import serializers
from movies.serializers import MovieSerializer
from .models import WatchHistory


class WatchHistorySerializer(serializers.ModelSerializer):
    movie = MovieSerializer(read_only=True)

    class Meta:
        model = WatchHistory
        fields = [
            'id', 'movie', 'status', 'user_rating', 'review', 'watched_at',
            'is_favorite', 'rewatch_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['watched_at', 'created_at', 'updated_at']


class AddToHistorySerializer(serializers.Serializer):
    tmdb_id = serializers.IntegerField(min_value=1)
    status = serializers.ChoiceField(choices=WatchHistory.Status.choices, default=WatchHistory.Status.WATCHLIST)
    user_rating = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)
    review = serializers.CharField(max_length=500, required=False, allow_null=True, allow_blank=True)


class UpdateHistorySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=WatchHistory.Status.choices, required=False)
    user_rating = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)
    review = serializers.CharField(max_length=500, required=False, allow_null=True, allow_blank=True)
    is_favorite = serializers.BooleanField(required=False)
    rewatch_count = serializers.IntegerField(min_value=0, required=False)
