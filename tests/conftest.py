from datetime import date, timedelta
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.projects.models import ProjectRequest
from apps.users.models import Profile, User

WEBHOOK_SECRET = "whsec_test"


@pytest.fixture(autouse=True)
def razorpay_settings(settings, tmp_path):
    settings.RAZORPAY_KEY_ID = "rzp_test_key"
    settings.RAZORPAY_KEY_SECRET = "rzp_test_secret"
    settings.RAZORPAY_WEBHOOK_SECRET = WEBHOOK_SECRET
    settings.MEDIA_ROOT = tmp_path
    return settings


def make_user(email, role, first_name="Test", last_name="User", **profile_fields):
    user = User.objects.create_user(
        email=email,
        username=email.split("@")[0],
        password="Secret123",
        role=role,
    )
    if role != User.ADMIN or profile_fields:
        Profile.objects.create(
            user=user,
            user_type=role,
            first_name=first_name,
            last_name=last_name,
            **profile_fields,
        )
    return user


@pytest.fixture
def client_user(db):
    return make_user("client@example.com", User.CLIENT, "Cara", "Client", college_name="IIT Delhi")


@pytest.fixture
def freelancer(db):
    return make_user(
        "freelancer@example.com",
        User.FREELANCER,
        "Fred",
        "Lancer",
        skills=["Python", "Django"],
        is_verified=True,
        college_name="IIT Delhi",
    )


@pytest.fixture
def other_freelancer(db):
    return make_user(
        "other@example.com",
        User.FREELANCER,
        "Olga",
        "Other",
        skills=["Figma"],
    )


@pytest.fixture
def admin_user(db):
    return make_user("admin@collegeskills.com", User.ADMIN)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client():
    def _auth(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _auth


@pytest.fixture
def project(client_user):
    return ProjectRequest.objects.create(
        client=client_user,
        title="Build a portfolio site",
        description="Static site with a contact form",
        category="Web Development",
        budget_min=Decimal("300"),
        budget_max=Decimal("800"),
        deadline=date.today() + timedelta(days=30),
        skills=["python", "django"],
    )
