from django.urls import include
from django.urls import path

app_name = "api"
urlpatterns = [
    path("chat/", include("productivity.chat.api.urls")),
    path("notifications/", include("productivity.notifications.api.urls")),
    path("presence/", include("productivity.realtime.api.urls")),
]
