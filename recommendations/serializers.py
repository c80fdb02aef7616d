from rest_framework import serializers
from movies.serializers import MovieSerializer
from .models import Recommendation


class RecommendationSerializer(serializers.ModelSerializer):
    movies = serializers.SerializerMethodField()
    feedback = serializers.SerializerMethodField()

    class Meta:
        model = Recommendation
        fields = ['id', 'prompt', 'ai_response', 'ai_model', 'movies', 'feedback', 'created_at']

    def get_movies(self, obj):
        return MovieSerializer(obj.recommended_movies, many=True).data

    def get_feedback(self, obj):
        return {'rating': obj.feedback_rating, 'comment': obj.feedback_comment}
