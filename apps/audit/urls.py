from django.urls import path
from .views import AdminActivityLogListView, LogActivityView

urlpatterns = [
    path("activity/", LogActivityView.as_view(), name="log-activity"),
    path("admin/activity-logs/", AdminActivityLogListView.as_view(), name="admin-activity-logs"),
]
