from django.urls import path

from .views import NotificationDispatchView

app_name = "notifications"

urlpatterns = [
    path("", NotificationDispatchView.as_view(), name="dispatch"),
]
