from django.urls import include, path
from rest_framework.routers import SimpleRouter
from rest_framework_simplejwt.views import TokenRefreshView

from .views import StaffTokenObtainPairView, UserViewSet

app_name = "users"

router = SimpleRouter()
router.register(r"", UserViewSet, basename="user")

auth_urlpatterns = [
    path("token/", StaffTokenObtainPairView.as_view(), name="token-obtain"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
]

urlpatterns = [
    path("", include(router.urls)),
]
