from __future__ import annotations

from typing import Any

from rest_framework import serializers


class NotificationDispatchSerializer(serializers.Serializer):
    """Push a transient notification.

    Accepted targeting forms (exactly one is required):
    - user_id: str | int, delivered to every open connection of that user
    - room: str, delivered to every connection in that room

    ``data`` is merged into the payload next to ``type`` and ``message``.
    Nothing is stored: if nobody is connected the notification is dropped.
    """

    type = serializers.CharField(max_length=100)
    message = serializers.CharField()
    data = serializers.DictField(required=False, default=dict)

    # Accept either int or string ids, and tolerate "" (treated as missing).
    user_id = serializers.CharField(required=False, allow_blank=True)
    room = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        for key in ("user_id", "room"):
            value = attrs.get(key)
            if isinstance(value, str):
                value = value.strip()
                if value:
                    attrs[key] = value
                else:
                    attrs.pop(key, None)

        targets = ["user_id" in attrs, "room" in attrs]
        if sum(targets) != 1:
            msg = "Provide exactly one of user_id, room."
            raise serializers.ValidationError(msg)
        return attrs
