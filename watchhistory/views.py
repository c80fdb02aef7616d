from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import WatchHistory
from .serializers import WatchHistorySerializer, AddToHistorySerializer, UpdateHistorySerializer
from .services import WatchHistoryService


class WatchHistoryViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    serializer_class = WatchHistorySerializer
    lookup_value_regex = r'\d+'
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status', 'is_favorite']
    ordering_fields = ['created_at', 'updated_at', 'user_rating', 'watched_at']
    ordering = ['-created_at']

    def get_queryset(self):
        return WatchHistory.objects.filter(user=self.request.user).select_related('movie')

    def get_service(self):
        return WatchHistoryService()

    def create(self, request):
        serializer = AddToHistorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry, created = self.get_service().add(request.user, **serializer.validated_data)
        return Response(
            WatchHistorySerializer(entry).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    def partial_update(self, request, pk=None):
        serializer = UpdateHistorySerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        entry = WatchHistoryService.get_owned(pk, request.user)
        entry = WatchHistoryService.update(entry, **serializer.validated_data)
        return Response(WatchHistorySerializer(entry).data)

    def destroy(self, request, pk=None):
        entry = WatchHistoryService.get_owned(pk, request.user)
        entry.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['patch'])
    def favorite(self, request, pk=None):
        entry = WatchHistoryService.toggle_favorite(WatchHistoryService.get_owned(pk, request.user))
        return Response(WatchHistorySerializer(entry).data)

    @action(detail=False)
    def stats(self, request):
        return Response(WatchHistoryService.stats(request.user))
