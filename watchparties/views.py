from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .serializers import (
    WatchPartySerializer, PartyMemberSerializer, CreatePartySerializer, JoinPartySerializer,
    AddGuestSerializer, PreferenceSubmissionSerializer, StatusSerializer
)
from .services import WatchPartyService, GroupRecommendationService


class WatchPartyViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    serializer_class = WatchPartySerializer
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        return WatchPartyService.parties_for(self.request.user, self.request.query_params.get('status'))

    def get_group_service(self):
        return GroupRecommendationService()

    def respond(self, party, status_code=status.HTTP_200_OK):
        party = WatchPartyService.get_party(party.pk)
        return Response(WatchPartySerializer(party).data, status=status_code)

    def create(self, request):
        serializer = CreatePartySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        party = WatchPartyService.create_party(
            request.user,
            serializer.validated_data['name'],
            scheduled_for=serializer.validated_data.get('scheduled_for')
        )
        return self.respond(party, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        return self.respond(WatchPartyService.get_for_member(pk, request.user))

    def destroy(self, request, pk=None):
        party = WatchPartyService.get_for_creator(pk, request.user, action='delete')
        party.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['post'], url_path=r'join/(?P<invite_code>[A-Za-z0-9]+)')
    def join(self, request, invite_code=None):
        serializer = JoinPartySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        party = WatchPartyService.join(invite_code, request.user, serializer.validated_data.get('guest_name'))
        return self.respond(party)

    @action(detail=True, methods=['post'])
    def guests(self, request, pk=None):
        serializer = AddGuestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        party = WatchPartyService.get_party(pk)
        member = WatchPartyService.add_guest(party, request.user, serializer.validated_data['guest_name'])
        return Response(PartyMemberSerializer(member).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def preferences(self, request, pk=None):
        serializer = PreferenceSubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        party = WatchPartyService.get_party(pk)
        party = WatchPartyService.submit_preferences(party, request.user, **serializer.validated_data)
        return self.respond(party)

    @action(detail=True, methods=['post'])
    def recommendations(self, request, pk=None):
        party = WatchPartyService.get_for_member(pk, request.user)
        party, preferences = self.get_group_service().generate(party)
        data = WatchPartySerializer(WatchPartyService.get_party(party.pk)).data
        data['group_preferences'] = {
            'top_genres': preferences.top_genres,
            'top_moods': preferences.top_moods,
            'member_count': preferences.member_count,
        }
        return Response(data)

    @action(detail=True, methods=['patch'], url_path='status')
    def update_status(self, request, pk=None):
        serializer = StatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        party = WatchPartyService.get_for_creator(pk, request.user, action='update status of')
        party = WatchPartyService.update_status(party, serializer.validated_data['status'])
        return self.respond(party)

    @action(detail=True, methods=['delete'])
    def leave(self, request, pk=None):
        party = WatchPartyService.get_party(pk)
        WatchPartyService.leave(party, request.user)
        return Response({'status': 'Left party successfully'})
