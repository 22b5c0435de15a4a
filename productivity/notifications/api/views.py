from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from productivity.realtime.events.notifications import publish_room_notification
from productivity.realtime.events.notifications import publish_user_notification

from .serializers import NotificationDispatchSerializer


@extend_schema(tags=["Notifications"], request=NotificationDispatchSerializer)
class NotificationDispatchView(APIView):
    """Push a realtime notification to one user or one room (staff only)."""

    permission_classes = [IsAuthenticated, IsAdminUser]

    def post(self, request):
        serializer = NotificationDispatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if "user_id" in data:
            delivered = publish_user_notification(
                data["user_id"],
                data["type"],
                data["message"],
                data["data"],
            )
            target = {"user_id": data["user_id"]}
        else:
            delivered = publish_room_notification(
                data["room"],
                data["type"],
                data["message"],
                data["data"],
            )
            target = {"room": data["room"]}

        return Response(
            {**target, "delivered": delivered},
            status=status.HTTP_202_ACCEPTED,
        )
