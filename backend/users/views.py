import logging

from rest_framework import mixins, permissions, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView

from .models import User
from .permissions import IsAdmin, IsAnyStaff
from .serializers import (
    StaffTokenObtainPairSerializer,
    UserCreateSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


class StaffTokenObtainPairView(TokenObtainPairView):
    serializer_class = StaffTokenObtainPairSerializer
    permission_classes = [permissions.AllowAny]


class UserViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Staff accounts.

    Admins list, create and deactivate accounts; any staff member may read a
    single account or their own via `me/`.
    """

    queryset = User.objects.all()
    serializer_class = UserSerializer
    filterset_fields = ["role", "is_active"]

    def get_permissions(self):
        if self.action in ("retrieve", "me"):
            permission_classes = [IsAnyStaff]
        else:
            permission_classes = [IsAdmin]
        return [permission() for permission in permission_classes]

    def get_serializer_class(self):
        if self.action == "create":
            return UserCreateSerializer
        return UserSerializer

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info(f"Staff account {user.username} created with role {user.role}")

    def perform_destroy(self, instance):
        # Accounts are deactivated so historic attributions stay intact.
        instance.is_active = False
        instance.save(update_fields=["is_active", "updated_at"])
        logger.info(f"Staff account {instance.username} deactivated")

    @action(detail=False, methods=["get"])
    def me(self, request):
        return Response(UserSerializer(request.user).data)
