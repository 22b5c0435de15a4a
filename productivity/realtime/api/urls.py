from django.urls import path

from .views import PresenceView

app_name = "presence"

urlpatterns = [
    path("", PresenceView.as_view(), name="online"),
]
