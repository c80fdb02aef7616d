from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Recommendation
from .serializers import RecommendationSerializer
from .services import RecommendationService, PreferenceHints


class RecommendationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    lookup_value_regex = r'\d+'
    serializer_class = RecommendationSerializer

    def get_queryset(self):
        return Recommendation.objects.filter(user=self.request.user).prefetch_related('items__movie')

    def get_service(self):
        return RecommendationService()

    def create(self, request):
        recommendation = self.get_service().create(
            request.user,
            request.data.get('prompt'),
            hints=PreferenceHints.for_user(request.user)
        )
        return Response(RecommendationSerializer(recommendation).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        recommendation = RecommendationService.get_owned(pk, request.user)
        return Response(RecommendationSerializer(recommendation).data)

    def destroy(self, request, pk=None):
        recommendation = RecommendationService.get_owned(pk, request.user)
        recommendation.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['patch'])
    def feedback(self, request, pk=None):
        recommendation = RecommendationService.get_owned(pk, request.user)
        RecommendationService.add_feedback(
            recommendation,
            rating=request.data.get('rating'),
            comment=request.data.get('comment')
        )
        return Response(RecommendationSerializer(recommendation).data)
