from django.contrib import admin
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from users.views import RegisterView, ProfileView, ChangePasswordView, AdminUserViewSet, AdminStatsView
from movies.views import MovieViewSet
from recommendations.views import RecommendationViewSet
from watchparties.views import WatchPartyViewSet
from watchhistory.views import WatchHistoryViewSet

router = DefaultRouter()
router.register(r'movies', MovieViewSet, basename='movie')
router.register(r'recommendations', RecommendationViewSet, basename='recommendation')
router.register(r'watchparty', WatchPartyViewSet, basename='watchparty')
router.register(r'watchhistory', WatchHistoryViewSet, basename='watchhistory')
router.register(r'admin/users', AdminUserViewSet, basename='admin-user')

urlpatterns = [
    path('admin/', admin.site.urls),

    # Accounts
    path('api/auth/register/', RegisterView.as_view(), name='register'),
    path('api/auth/profile/', ProfileView.as_view(), name='profile'),
    path('api/auth/change-password/', ChangePasswordView.as_view(), name='change_password'),
    path('api/admin/stats/', AdminStatsView.as_view(), name='admin_stats'),

    path('api/', include(router.urls)),
    path('api-auth/', include('rest_framework.urls')),
]
