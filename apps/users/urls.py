from django.urls import path
from .views import (
    BrowseFreelancers,
    LoginView,
    MeView,
    ProfileView,
    PublicProfileView,
    RegisterView,
)

urlpatterns = [
    # Authentication & registration
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("me/", MeView.as_view(), name="me"),

    # Profiles
    path("profile/", ProfileView.as_view(), name="profile"),
    path("profiles/<int:user_id>/", PublicProfileView.as_view(), name="public-profile"),

    # freelancers
    path("freelancers/", BrowseFreelancers.as_view(), name="freelancers"),
]
