from __future__ import annotations

from django.conf import settings
from rest_framework import serializers


class ChatMessageSerializer(serializers.Serializer):
    room = serializers.CharField()
    message = serializers.CharField(trim_whitespace=False)

    def validate_room(self, value: str) -> str:
        limit = getattr(settings, "REALTIME_MAX_ROOM_NAME_LENGTH", None)
        if limit is not None and len(value) > limit:
            msg = f"Ensure this field has no more than {limit} characters."
            raise serializers.ValidationError(msg)
        return value

    def validate_message(self, value: str) -> str:
        limit = getattr(settings, "REALTIME_MAX_MESSAGE_LENGTH", None)
        if limit is not None and len(value) > limit:
            msg = f"Ensure this field has no more than {limit} characters."
            raise serializers.ValidationError(msg)
        return value
