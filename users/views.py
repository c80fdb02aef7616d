from django.contrib.auth import update_session_auth_hash
from rest_framework import generics, mixins, permissions, status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from moodreel.exceptions import ValidationFailure
from movies.models import Movie
from recommendations.models import Recommendation
from watchhistory.models import WatchHistory
from watchparties.models import WatchParty
from .models import User
from .serializers import UserSerializer, RegisterSerializer, ChangePasswordSerializer


class RegisterView(generics.CreateAPIView):
    serializer_class = RegisterSerializer
    permission_classes = [permissions.AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class ProfileView(generics.RetrieveUpdateAPIView):
    serializer_class = UserSerializer

    def get_object(self):
        return self.request.user


class ChangePasswordView(APIView):
    def put(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        if not user.check_password(serializer.validated_data['current_password']):
            raise ValidationFailure('Current password is incorrect.')

        user.set_password(serializer.validated_data['new_password'])
        user.save()
        # Keep the current session valid after the password change
        update_session_auth_hash(request, user)
        return Response({'status': 'Password updated successfully'})


class AdminUserViewSet(mixins.DestroyModelMixin, viewsets.ReadOnlyModelViewSet):
    queryset = User.objects.order_by('-date_joined')
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAdminUser]

    def perform_destroy(self, instance):
        if instance == self.request.user:
            raise ValidationFailure('You cannot delete your own account.')
        instance.delete()


class AdminStatsView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def get(self, request):
        recent_users = User.objects.order_by('-date_joined')[:5]
        return Response({
            'stats': {
                'total_users': User.objects.count(),
                'total_movies': Movie.objects.count(),
                'total_recommendations': Recommendation.objects.count(),
                'total_watch_history': WatchHistory.objects.count(),
                'total_watch_parties': WatchParty.objects.count(),
            },
            'recent_users': [
                {'id': u.id, 'username': u.username, 'email': u.email, 'date_joined': u.date_joined}
                for u in recent_users
            ],
        })
