from __future__ import annotations

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from productivity.realtime.socketio import hub


@extend_schema(tags=["Realtime"])
class PresenceView(APIView):
    """Users that currently have at least one open realtime connection."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        online = async_to_sync(hub.online_users)()
        return Response({"online": online, "count": len(online)})
