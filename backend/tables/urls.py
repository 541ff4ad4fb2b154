from django.urls import include, path
from rest_framework import routers

from .views import TableViewSet

app_name = "tables"

router = routers.SimpleRouter()
router.register(r"tables", TableViewSet, basename="table")

urlpatterns = [
    path("", include(router.urls)),
]
