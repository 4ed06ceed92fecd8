import pytest
from django.core.management import call_command

from apps.gigs.models import Category, Gig
from apps.storage.models import StoredFile


def gig_payload(**extra):
    payload = {
        "title": "Django REST API",
        "description": "I will build your API",
        "category": "Web Development",
        "subcategory": "Backend Development",
        "tags": ["django", " api ", "Django"],
        "base_price": "1500.00",
        "delivery_time": 5,
        "packages": [
            {"name": "Basic", "description": "One endpoint", "price": "1500.00", "delivery_time": 5, "features": ["1 endpoint"]},
            {"name": "Pro", "description": "Full API", "price": "5000.00", "delivery_time": 10},
        ],
    }
    payload.update(extra)
    return payload


@pytest.mark.django_db
class TestCategories:

    def test_seed_is_idempotent(self, api_client):
        call_command("seed_categories")
        call_command("seed_categories")

        assert Category.objects.count() == 8
        names = [c["name"] for c in api_client.get("/api/categories/").data]
        assert "Tutoring & Education" in names

    def test_inactive_hidden(self, api_client):
        Category.objects.create(name="Retired", is_active=False)
        assert api_client.get("/api/categories/").data == []


@pytest.mark.django_db
class TestCreateGig:

    def test_verified_freelancer_creates_gig(self, auth_client, freelancer):
        image = StoredFile.objects.create(
            file="uploads/shot.png", original_name="shot.png", content_type="image/png", uploaded_by=freelancer
        )

        response = auth_client(freelancer).post(
            "/api/gigs/", gig_payload(images=[str(image.id)]), format="json"
        )

        assert response.status_code == 201
        gig = Gig.objects.get(id=response.data["id"])
        assert gig.freelancer == freelancer
        assert gig.tags == ["django", "api"]
        assert gig.packages.count() == 2
        assert list(gig.images.all()) == [image]

    def test_unverified_freelancer_refused(self, auth_client, other_freelancer):
        response = auth_client(other_freelancer).post("/api/gigs/", gig_payload(), format="json")

        assert response.status_code == 403
        assert not Gig.objects.exists()

    def test_client_refused(self, auth_client, client_user):
        response = auth_client(client_user).post("/api/gigs/", gig_payload(), format="json")
        assert response.status_code == 403

    def test_price_must_be_positive(self, auth_client, freelancer):
        response = auth_client(freelancer).post("/api/gigs/", gig_payload(base_price="0"), format="json")
        assert response.status_code == 400


@pytest.mark.django_db
class TestBrowseGigs:

    @pytest.fixture
    def gigs(self, freelancer):
        def make(title, category, price, active=True):
            return Gig.objects.create(
                freelancer=freelancer,
                title=title,
                description="d",
                category=category,
                base_price=price,
                delivery_time=3,
                is_active=active,
            )
        return [
            make("Logo design", "Design", 500),
            make("React landing page", "Web Development", 2000),
            make("Django backend", "Web Development", 4000),
            make("Hidden gig", "Web Development", 100, active=False),
        ]

    def test_only_active(self, api_client, gigs):
        titles = {g["title"] for g in api_client.get("/api/gigs/").data}
        assert "Hidden gig" not in titles
        assert len(titles) == 3

    def test_filters(self, api_client, gigs):
        web = api_client.get("/api/gigs/", {"category": "Web Development", "max_price": 3000}).data
        assert [g["title"] for g in web] == ["React landing page"]

        search = api_client.get("/api/gigs/", {"search": "django", "min_price": 1000}).data
        assert [g["title"] for g in search] == ["Django backend"]

    def test_limit(self, api_client, gigs):
        assert len(api_client.get("/api/gigs/", {"limit": 2}).data) == 2

    def test_freelancer_profile_embedded(self, api_client, gigs):
        gig = api_client.get(f"/api/gigs/{gigs[0].id}/").data
        assert gig["freelancer"]["full_name"] == "Fred Lancer"

    def test_missing_gig_is_null(self, api_client, db):
        assert api_client.get("/api/gigs/999/").data is None

    def test_my_gigs_include_inactive(self, auth_client, freelancer, gigs):
        assert len(auth_client(freelancer).get("/api/gigs/mine/").data) == 4


@pytest.mark.django_db
class TestUpdateGig:

    def test_owner_updates(self, auth_client, freelancer):
        gig = Gig.objects.create(
            freelancer=freelancer, title="Old", description="d", category="Design", base_price=100, delivery_time=2
        )

        response = auth_client(freelancer).patch(
            f"/api/gigs/{gig.id}/", {"title": "New", "is_active": False}, format="json"
        )

        assert response.status_code == 200
        gig.refresh_from_db()
        assert gig.title == "New"
        assert gig.is_active is False

    def test_stranger_refused(self, auth_client, freelancer, other_freelancer):
        gig = Gig.objects.create(
            freelancer=freelancer, title="Old", description="d", category="Design", base_price=100, delivery_time=2
        )

        response = auth_client(other_freelancer).patch(f"/api/gigs/{gig.id}/", {"title": "Hacked"}, format="json")

        assert response.status_code == 403
        gig.refresh_from_db()
        assert gig.title == "Old"
