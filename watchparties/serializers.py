from rest_framework import serializers
from movies.serializers import MovieSerializer
from users.serializers import PublicUserSerializer
from .models import WatchParty, PartyMember


class PartyMemberSerializer(serializers.ModelSerializer):
    user = PublicUserSerializer(read_only=True)
    display_name = serializers.ReadOnlyField()

    class Meta:
        model = PartyMember
        fields = ['id', 'user', 'guest_name', 'display_name', 'has_responded', 'joined_at']


class WatchPartySerializer(serializers.ModelSerializer):
    created_by = PublicUserSerializer(read_only=True)
    members = PartyMemberSerializer(many=True, read_only=True)
    preferences = serializers.SerializerMethodField()
    group_recommendation = serializers.SerializerMethodField()

    class Meta:
        model = WatchParty
        fields = [
            'id', 'name', 'created_by', 'invite_code', 'members', 'preferences',
            'group_recommendation', 'scheduled_for', 'status', 'created_at'
        ]

    def get_preferences(self, obj):
        return {'genres': obj.preferred_genres, 'moods': obj.preferred_moods, 'avoid': obj.avoid}

    def get_group_recommendation(self, obj):
        return {
            'movies': MovieSerializer(obj.group_movies, many=True).data,
            'explanation': obj.recommendation_explanation,
            'generated_at': obj.recommendation_generated_at,
        }


class CreatePartySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    scheduled_for = serializers.DateTimeField(required=False, allow_null=True)


class JoinPartySerializer(serializers.Serializer):
    guest_name = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)


class AddGuestSerializer(serializers.Serializer):
    guest_name = serializers.CharField(max_length=50)


class PreferenceSubmissionSerializer(serializers.Serializer):
    genres = serializers.ListField(child=serializers.CharField(max_length=50), required=False, default=list)
    moods = serializers.ListField(child=serializers.CharField(max_length=50), required=False, default=list)
    avoid = serializers.ListField(child=serializers.CharField(max_length=100), required=False, default=list)
    member_id = serializers.IntegerField(required=False, allow_null=True)


class StatusSerializer(serializers.Serializer):
    status = serializers.CharField()
