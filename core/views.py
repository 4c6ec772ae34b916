import logging

from django.core.cache import cache
from django.db import connection, DatabaseError
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import extend_schema
from drf_spectacular.types import OpenApiTypes

logger = logging.getLogger("django")


@extend_schema(
    tags=['Health'],
    responses={200: OpenApiTypes.OBJECT, 500: OpenApiTypes.OBJECT},
    description="Reports whether the API can reach its database and cache."
)
class HealthCheckView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = []

    def get(self, request):
        checks = {"database": "connected", "cache": "connected"}

        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except DatabaseError:
            logger.exception("Health check: database unreachable")
            checks["database"] = "disconnected"

        try:
            cache.set("health:ping", "pong", 5)
            if cache.get("health:ping") != "pong":
                checks["cache"] = "disconnected"
        except Exception:
            logger.exception("Health check: cache unreachable")
            checks["cache"] = "disconnected"

        healthy = all(value == "connected" for value in checks.values())
        return Response(
            {
                "status": "healthy" if healthy else "unhealthy",
                **checks,
                "timestamp": timezone.now(),
            },
            status=status.HTTP_200_OK if healthy else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
