from datetime import timedelta

import pytest
from django.utils import timezone

from apps.audit.models import ActivityLog
from apps.audit.services.activity_logger import log_activity


@pytest.mark.django_db
class TestActivityLog:

    def test_log_own_activity(self, auth_client, client_user):
        response = auth_client(client_user).post(
            "/api/activity/", {"action": "viewed_dashboard", "details": "home"}, format="json"
        )

        assert response.status_code == 201
        log = ActivityLog.objects.get(id=response.data["id"])
        assert log.user == client_user
        assert log.action == "viewed_dashboard"

    def test_admin_only(self, auth_client, client_user):
        assert auth_client(client_user).get("/api/admin/activity-logs/").status_code == 403

    def test_filters(self, auth_client, admin_user, client_user, freelancer):
        log_activity(client_user, "project_created", related_id=1)
        log_activity(freelancer, "proposal_submitted", related_id=2)
        old = log_activity(freelancer, "proposal_submitted")
        ActivityLog.objects.filter(id=old.id).update(timestamp=timezone.now() - timedelta(days=3))
        api = auth_client(admin_user)

        by_action = api.get("/api/admin/activity-logs/", {"action": "proposal_submitted"}).data
        assert len(by_action) == 2

        by_user = api.get("/api/admin/activity-logs/", {"user": client_user.id}).data
        assert [log["action"] for log in by_user] == ["project_created"]

        by_name = api.get(
            "/api/admin/activity-logs/", {"performer_name": "fred", "user": client_user.id}
        ).data
        assert {log["performer_name"] for log in by_name} == {"Fred Lancer"}

        today = timezone.localdate().isoformat()
        by_date = api.get("/api/admin/activity-logs/", {"date": today}).data
        assert old.id not in [log["id"] for log in by_date]
        assert len(by_date) == 2

    def test_newest_fifty(self, auth_client, admin_user, client_user):
        ActivityLog.objects.bulk_create(
            [ActivityLog(user=client_user, action=f"a{i}") for i in range(60)]
        )

        data = auth_client(admin_user).get("/api/admin/activity-logs/").data

        assert len(data) == 50
