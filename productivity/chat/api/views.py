from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.settings import api_settings

from productivity.realtime.events.chat import publish_chat_message

from .serializers import ChatMessageSerializer


def _sender_name(user) -> str:
    return user.get_username() or getattr(user, "email", "")


@extend_schema(tags=["Chat"], request=ChatMessageSerializer)
class ChatMessageView(APIView):
    """Send a chat message over HTTP instead of the socket.

    The message is broadcast to the room exactly like a ``send_message``
    socket event; the sender is the authenticated user.
    """

    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = ChatMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = request.user
        sender_id = str(getattr(user, api_settings.USER_ID_FIELD))
        delivered = publish_chat_message(
            data["room"],
            data["message"],
            sender_id,
            _sender_name(user),
        )
        return Response(
            {"detail": "Message sent.", "room": data["room"], "delivered": delivered},
            status=status.HTTP_200_OK,
        )


@extend_schema(tags=["Chat"])
class ChatHistoryView(APIView):
    """Past messages of a room.

    Messages are relayed, never stored, so the history is always empty.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request, room: str):
        return Response({"room": room, "messages": []}, status=status.HTTP_200_OK)
