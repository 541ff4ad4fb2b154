from django.urls import include, path
from rest_framework.routers import SimpleRouter

from . import views

app_name = "reports"

router = SimpleRouter()
router.register(r"orders", views.OrderStatisticsViewSet, basename="order-stats")
router.register(r"staff", views.StaffStatisticsViewSet, basename="staff-stats")

urlpatterns = [
    path("", include(router.urls)),
]

# GET /api/reports/orders/?from=2024-01-01&to=2024-02-01&group_by=day
# GET /api/reports/staff/{id}/waiter/?from=2024-01-01&to=2024-02-01[&group_by=week]
# GET /api/reports/staff/{id}/cashier/?from=2024-01-01&to=2024-02-01[&group_by=month]
