from django.urls import path

from .views import ChatHistoryView
from .views import ChatMessageView

app_name = "chat"

urlpatterns = [
    path("message/", ChatMessageView.as_view(), name="message"),
    path("history/<str:room>/", ChatHistoryView.as_view(), name="history"),
]
