import pytest

from apps.notifications.models import Notification
from apps.storage.models import StoredFile
from apps.users.models import Profile, User
from apps.verification.models import VerificationRequest
from tests.conftest import make_user


@pytest.fixture
def student(db):
    return make_user("student@example.com", User.FREELANCER, "Sam", "Student")


@pytest.fixture
def student_card(student):
    return StoredFile.objects.create(
        file="uploads/card.png",
        original_name="card.png",
        content_type="image/png",
        size=10,
        uploaded_by=student,
    )


def submit(api, student_card, **extra):
    payload = {
        "college_email": "sam@iitd.ac.in",
        "college_name": "IIT Delhi",
        "course": "B.Tech",
        "student_id": str(student_card.id),
    }
    payload.update(extra)
    return api.post("/api/verification/", payload, format="json")


@pytest.mark.django_db
class TestSubmitVerification:

    def test_submit_copies_college_details(self, auth_client, student, student_card):
        response = submit(auth_client(student), student_card)

        assert response.status_code == 201
        assert response.data["status"] == VerificationRequest.PENDING

        profile = Profile.objects.get(user=student)
        assert profile.college_email == "sam@iitd.ac.in"
        assert profile.college_name == "IIT Delhi"
        assert profile.student_id_id == student_card.id
        assert profile.is_verified is False

    def test_second_request_refused_while_pending(self, auth_client, student, student_card):
        api = auth_client(student)
        submit(api, student_card)

        response = submit(api, student_card)

        assert response.status_code == 400
        assert VerificationRequest.objects.filter(user=student).count() == 1

    def test_clients_cannot_submit(self, auth_client, client_user):
        card = StoredFile.objects.create(
            file="uploads/c.png", original_name="c.png", content_type="image/png", uploaded_by=client_user
        )
        response = submit(auth_client(client_user), card)
        assert response.status_code == 403

    def test_foreign_file_refused(self, auth_client, student, other_freelancer, student_card):
        response = submit(auth_client(other_freelancer), student_card)
        assert response.status_code == 400

    def test_my_status(self, auth_client, api_client, student, student_card):
        api = auth_client(student)
        assert api.get("/api/verification/me/").data is None

        submit(api, student_card)

        assert api.get("/api/verification/me/").data["status"] == VerificationRequest.PENDING
        assert api_client.get("/api/verification/me/").data is None


@pytest.mark.django_db
class TestAdminReview:

    def test_non_admin_refused(self, auth_client, client_user):
        response = auth_client(client_user).get("/api/admin/verifications/")
        assert response.status_code == 403

    def test_admin_email_alone_is_not_enough(self, auth_client, db):
        impostor = make_user("owner@collegeskills.com", User.CLIENT)
        assert auth_client(impostor).get("/api/admin/verifications/").status_code == 403

    def test_pending_list_and_details(self, auth_client, admin_user, student, student_card):
        submit(auth_client(student), student_card)
        api = auth_client(admin_user)

        pending = api.get("/api/admin/verifications/")
        assert pending.status_code == 200
        assert len(pending.data) == 1
        assert pending.data[0]["profile"]["full_name"] == "Sam Student"
        assert pending.data[0]["user_info"]["email"] == "student@example.com"

        detail = api.get(f"/api/admin/verifications/{pending.data[0]['id']}/")
        assert detail.status_code == 200
        assert detail.data["student_id_url"].endswith("card.png")
        assert detail.data["govt_id_url"] is None

    def test_approval_verifies_profile(self, auth_client, admin_user, student, student_card):
        request_id = submit(auth_client(student), student_card).data["id"]

        response = auth_client(admin_user).post(
            f"/api/admin/verifications/{request_id}/review/",
            {"status": "approved", "admin_notes": "Looks good"},
            format="json",
        )

        assert response.status_code == 200
        verification = VerificationRequest.objects.get(id=request_id)
        assert verification.status == VerificationRequest.APPROVED
        assert verification.reviewed_by == admin_user
        assert verification.reviewed_at is not None
        assert Profile.objects.get(user=student).is_verified is True
        assert Notification.objects.filter(
            recipient=student, notif_type=Notification.VERIFICATION_APPROVED
        ).exists()

    def test_rejection_allows_resubmission(self, auth_client, admin_user, student, student_card):
        api = auth_client(student)
        request_id = submit(api, student_card).data["id"]

        auth_client(admin_user).post(
            f"/api/admin/verifications/{request_id}/review/",
            {"status": "rejected", "admin_notes": "Blurry photo"},
            format="json",
        )

        assert Profile.objects.get(user=student).is_verified is False
        notif = Notification.objects.get(recipient=student, notif_type=Notification.VERIFICATION_REJECTED)
        assert "Blurry photo" in notif.message
        assert submit(api, student_card).status_code == 201

    def test_reviewed_request_is_final(self, auth_client, admin_user, student, student_card):
        request_id = submit(auth_client(student), student_card).data["id"]
        api = auth_client(admin_user)
        url = f"/api/admin/verifications/{request_id}/review/"
        api.post(url, {"status": "approved"}, format="json")

        response = api.post(url, {"status": "rejected"}, format="json")

        assert response.status_code == 400
        assert VerificationRequest.objects.get(id=request_id).status == VerificationRequest.APPROVED

    def test_invalid_status(self, auth_client, admin_user, student, student_card):
        request_id = submit(auth_client(student), student_card).data["id"]
        response = auth_client(admin_user).post(
            f"/api/admin/verifications/{request_id}/review/", {"status": "pending"}, format="json"
        )
        assert response.status_code == 400
